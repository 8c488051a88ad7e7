from textual.message import Message


class QuitRequestedMessage(Message):
    """
    broadcasted when the app is about to quit
    """

    bubble = True


class SignOutRequestedMessage(Message):
    """
    posted by the sidebar when the user confirms signing out
    """

    bubble = True


class SessionChangedMessage(Message):
    """
    Fired by the app whenever the auth session changes (sign in, sign out,
    restored session). Screens refresh user info and menus on it.
    """

    bubble = False


class CartChangedMessage(Message):
    """
    Fired by the app after every cart mutation, whichever screen made it.
    Cart views and the sidebar badge refresh on it.
    """

    bubble = False


class ProductsChangedMessage(Message):
    """
    Fired after an admin adds, edits or deletes a product.
    Catalog screens reload on it.
    """

    bubble = False


class OrderPlacedMessage(Message):
    """
    Fired when checkout completes. Listened to by the admin screens.
    """

    bubble = False


class ModeSwitchedMessage(Message):
    """
    fired whenever switch_mode is called
    must be fired from app level
    """

    bubble = True

    def __init__(self, old_mode: str, new_mode: str) -> None:
        super().__init__()
        self.old_mode = old_mode
        self.new_mode = new_mode
