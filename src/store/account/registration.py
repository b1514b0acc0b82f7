"""User registration — command and handler."""

from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from store.account.user import User
from store.domain import store


@store.command(part_of="User")
class RegisterUser:
    """Make a user known to the store so it can own a cart and orders."""

    name: String(required=True, max_length=50)
    email: String(required=True, max_length=254)


@store.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        user = User.register(name=command.name, email=command.email)
        current_domain.repository_for(User).add(user)
        return str(user.id)
