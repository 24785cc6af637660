"""
Profile workflow error taxonomy.

Every error carries the HTTP status the API answers with, so routes can let
them propagate and the handler registered in app.main renders them.
"""


class ProfileError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotAuthenticated(ProfileError):
    status_code = 401

    def __init__(self, message: str = "No user logged in"):
        super().__init__(message)


class ProfileNotFound(ProfileError):
    status_code = 404

    def __init__(self, owner_id: str):
        super().__init__(f"No profile found for user {owner_id}")
        self.owner_id = owner_id


class InvalidProfile(ProfileError):
    status_code = 422


class UploadFailure(ProfileError):
    status_code = 502


class PersistFailure(ProfileError):
    status_code = 502
