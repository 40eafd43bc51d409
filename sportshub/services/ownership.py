from sportshub.core.exceptions import AuthorizationError
from sportshub.db.models.user import User


def ensure_owner_or_admin(owner_id, requester: User, action: str) -> None:
    """Allow the recorded owner or any admin; everyone else gets AuthorizationError."""
    if requester.is_admin:
        return
    if str(owner_id) != str(requester.id):
        raise AuthorizationError(f"User {requester.id} is not authorized to {action}")
