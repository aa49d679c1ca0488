from channelhub.services.accounts.dto import AccountOut, RegisterIn, UpdateDetailsIn
from channelhub.services.accounts.service import AccountService

__all__ = ["AccountOut", "AccountService", "RegisterIn", "UpdateDetailsIn"]
