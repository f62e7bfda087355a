from django.contrib.auth import get_user_model
from django.contrib.auth.backends import ModelBackend
from django.db.models import Q

User = get_user_model()


class UsernameOrEmailBackend(ModelBackend):
    """
    Sign in with the username or the email address, ignoring case.
    """

    def authenticate(self, request, username=None, password=None, email=None, **kwargs):
        identifier = email if email is not None else username
        if identifier is None or password is None:
            return None
        identifier = identifier.strip()

        candidates = list(User.objects.filter(Q(username__iexact=identifier) | Q(email__iexact=identifier)))
        if not candidates:
            # Run the default password hasher once to reduce the timing
            # difference between an existing and a nonexistent user
            User().set_password(password)
            return None

        # A username match wins over another account sharing the email
        candidates.sort(key=lambda user: (user.username.lower() != identifier.lower(), user.pk))
        for user in candidates:
            if user.check_password(password) and self.user_can_authenticate(user):
                return user
        return None
