"""Order models and the order status table."""

from datetime import datetime
from sqlalchemy import event
from sqlalchemy.orm import validates
from tastydash.extensions import db
from tastydash.errors import RecordDecodeError
from tastydash.utils.formatting import format_currency

STATUS_PENDING = 'pending'
STATUS_CONFIRMED = 'confirmed'
STATUS_DELIVERED = 'delivered'
STATUS_CANCELLED = 'cancelled'
ORDER_STATUSES = (STATUS_PENDING, STATUS_CONFIRMED, STATUS_DELIVERED, STATUS_CANCELLED)

# current status -> statuses an admin may move the order to
ALLOWED_TRANSITIONS = {
    STATUS_PENDING: frozenset({STATUS_CONFIRMED, STATUS_CANCELLED}),
    STATUS_CONFIRMED: frozenset({STATUS_DELIVERED, STATUS_CANCELLED}),
    STATUS_DELIVERED: frozenset(),
    STATUS_CANCELLED: frozenset(),
}
TERMINAL_STATUSES = frozenset(s for s, nxt in ALLOWED_TRANSITIONS.items() if not nxt)

PAYMENT_CARD = 'card'
PAYMENT_COD = 'cod'
PAYMENT_METHODS = (PAYMENT_CARD, PAYMENT_COD)


class Order(db.Model):
    """Order model."""
    __tablename__ = 'orders'

    id = db.Column(db.Integer, primary_key=True)
    order_number = db.Column(db.String(20), unique=True, nullable=False, index=True)
    customer_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    customer_name = db.Column(db.String(100), nullable=False)

    # Pricing, fixed at placement
    total_amount = db.Column(db.Numeric(14, 4), nullable=False)

    # Status
    status = db.Column(db.String(20), nullable=False, default=STATUS_PENDING, index=True)
    # pending, confirmed, delivered, cancelled
    status_updated_at = db.Column(db.DateTime)

    delivery_address = db.Column(db.Text, nullable=False)

    # Payment; never the full card number, expiry or CVV
    payment_method = db.Column(db.String(20), nullable=False, default=PAYMENT_COD)  # card, cod
    payment_card_last4 = db.Column(db.String(4))
    payment_cardholder_name = db.Column(db.String(100))

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, index=True)

    # Relationships
    lines = db.relationship('OrderLine', backref='order', order_by='OrderLine.id',
                            cascade='all, delete-orphan')

    @validates('status')
    def validate_status(self, key, status):
        if status not in ORDER_STATUSES:
            raise ValueError(f'Unknown order status: {status}')
        return status

    @validates('payment_method')
    def validate_payment_method(self, key, method):
        if method not in PAYMENT_METHODS:
            raise ValueError(f'Unknown payment method: {method}')
        return method

    @property
    def is_terminal(self):
        return self.status in TERMINAL_STATUSES

    def can_transition_to(self, status):
        """Check if an admin may move this order to ``status``."""
        return status in ALLOWED_TRANSITIONS.get(self.status, frozenset())

    @property
    def payment_summary(self):
        if self.payment_method != PAYMENT_CARD:
            return None
        return {
            'card_last4': self.payment_card_last4,
            'cardholder_name': self.payment_cardholder_name,
        }

    def to_dict(self, include_lines=True):
        """Decode the stored order, rejecting records that break its invariants."""
        if self.status not in ORDER_STATUSES:
            raise RecordDecodeError(f'Order {self.order_number} has unknown status {self.status!r}')
        if not self.lines:
            raise RecordDecodeError(f'Order {self.order_number} has no lines')

        data = {
            'order_number': self.order_number,
            'customer_id': self.customer_id,
            'customer_name': self.customer_name,
            'total_amount': str(self.total_amount),
            'total_display': format_currency(self.total_amount),
            'status': self.status,
            'allowed_statuses': sorted(ALLOWED_TRANSITIONS[self.status]),
            'delivery_address': self.delivery_address,
            'payment_method': self.payment_method,
            'payment_summary': self.payment_summary,
            'item_count': sum(line.quantity for line in self.lines),
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
        if include_lines:
            data['lines'] = [line.to_dict() for line in self.lines]
        return data

    def __repr__(self):
        return f'<Order {self.order_number}>'


class OrderLine(db.Model):
    """Snapshot of one cart line at placement time."""
    __tablename__ = 'order_lines'

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey('orders.id'), nullable=False)
    food_id = db.Column(db.String(64), nullable=False)
    name = db.Column(db.String(150), nullable=False)  # Snapshot of item name
    unit_price = db.Column(db.Numeric(10, 2), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)

    @property
    def line_total(self):
        return self.unit_price * self.quantity

    def to_dict(self):
        if self.quantity is None or self.quantity < 1:
            raise RecordDecodeError(f'Order line {self.id} has quantity {self.quantity!r}')
        return {
            'food_id': self.food_id,
            'name': self.name,
            'unit_price': str(self.unit_price),
            'quantity': self.quantity,
            'line_total': str(self.line_total),
        }

    def __repr__(self):
        return f'<OrderLine {self.name} x {self.quantity}>'


def _changed_columns(target):
    state = db.inspect(target)
    return {
        prop.key for prop in state.mapper.column_attrs
        if state.attrs[prop.key].history.has_changes()
    }


@event.listens_for(Order, 'before_update')
def _only_status_changes(mapper, connection, target):
    changed = _changed_columns(target) - {'status', 'status_updated_at'}
    if changed:
        raise ValueError(f'Order fields are fixed once placed: {", ".join(sorted(changed))}')


@event.listens_for(OrderLine, 'before_update')
def _lines_are_frozen(mapper, connection, target):
    if _changed_columns(target):
        raise ValueError('Order lines cannot be modified once placed')
