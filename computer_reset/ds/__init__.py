from .ds_hook import DSHook
from .ds_dict import DSDict
from .data import DS_IDENTITY_KIND, DS_FAILURE_KIND
from .errors import DSError, ContextAcquisitionError, ComputerNotFoundError, AmbiguousIdentityError

__all__ = ["DSHook", "DSDict", "DS_IDENTITY_KIND", "DS_FAILURE_KIND", "DSError", "ContextAcquisitionError",
           "ComputerNotFoundError", "AmbiguousIdentityError"]
