class ProblemOptions:
    """
    Configuration options for the optimization engine adapter.

    Args:
        cache_parameterizations (bool): If True, request the local parameterization
                                        once per variable kind and share it between
                                        all variables of that kind.
        check_contract (bool): If True, verify the storage contract of every variable
                               (1-D, contiguous, size() elements) and the ambient size
                               of its parameterization when it is added.
        verbose (bool): If True, print registration and update diagnostics.
    """
    def __init__(self, cache_parameterizations: bool = True,
                 check_contract: bool = True, verbose: bool = False):
        self.cache_parameterizations = cache_parameterizations
        self.check_contract = check_contract
        self.verbose = verbose
