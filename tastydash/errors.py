"""Exceptions raised by the cart, checkout and order lifecycle code."""


class TastyDashError(Exception):
    """Base exception for all TastyDash errors."""

    status_code = 400

    def to_dict(self):
        return {'success': False, 'message': str(self)}


class ValidationError(TastyDashError):
    """Raised when user input fails validation.

    ``errors`` maps a field name to a user-facing message.
    """

    status_code = 400

    def __init__(self, errors):
        self.errors = dict(errors)
        super().__init__('Please correct the highlighted fields.')

    def to_dict(self):
        data = super().to_dict()
        data['errors'] = self.errors
        return data


class EmptyCart(TastyDashError):
    """Raised when checking out a cart with no lines."""

    status_code = 409

    def __init__(self):
        super().__init__('Your cart is empty.')

    def to_dict(self):
        data = super().to_dict()
        data['redirect'] = '/cart'
        return data


class InvalidTransition(TastyDashError):
    """Raised when an order status change is not allowed."""

    status_code = 409

    def __init__(self, current, requested):
        self.current = current
        self.requested = requested
        super().__init__(f'Cannot change order status from {current} to {requested}.')


class OrderNotFound(TastyDashError):
    """Raised when an order identifier doesn't exist (or isn't visible)."""

    status_code = 404

    def __init__(self, order_id):
        self.order_id = order_id
        super().__init__(f'Order not found: {order_id}')


class RecordDecodeError(TastyDashError):
    """Raised when a stored record doesn't decode into its typed shape."""

    status_code = 500


class StoreError(TastyDashError):
    """Raised when a write to the backing store fails.

    The write may or may not have taken effect; callers should re-query.
    """

    status_code = 503

    def __init__(self, action):
        self.action = action
        super().__init__(f'Could not {action}. Please try again.')


class CartFull(TastyDashError):
    """Raised when adding a new item to a cart that already has the maximum number of lines."""

    status_code = 409

    def __init__(self, max_lines):
        self.max_lines = max_lines
        super().__init__(f'Your cart can hold up to {max_lines} different items.')
