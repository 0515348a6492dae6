# access/decorators.py
from functools import wraps

from boneplus.utils import json_error


def admin_required(view):
    """JSON flavour of staff_member_required: 401 instead of a login redirect."""
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        user = getattr(request, "user", None)
        if not (user and user.is_authenticated and user.is_active and user.is_staff):
            return json_error("Unauthorized", status=401)
        return view(request, *args, **kwargs)
    return wrapper
