"""Order placement and the order status lifecycle.

Placing an order snapshots the cart into an immutable ``Order``; clearing the
cart afterwards is the caller's job and is not part of the same transaction,
so an interrupted checkout can be resubmitted and produce a second order.
"""

import logging
from datetime import datetime
from decimal import Decimal
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from tastydash.extensions import db
from tastydash.errors import (EmptyCart, InvalidTransition, OrderNotFound,
                              StoreError, ValidationError)
from tastydash.models.order import (Order, OrderLine, ORDER_STATUSES, PAYMENT_CARD,
                                    STATUS_CANCELLED, STATUS_PENDING)
from tastydash.utils.formatting import generate_order_id
from tastydash.utils.pricing import compute_totals
from tastydash.utils.validators import clean_card_number, validate_checkout

logger = logging.getLogger(__name__)

MAX_ORDER_NUMBER_ATTEMPTS = 5


class OrderManager:
    """Creates orders from carts and moves them through their statuses."""

    def place_order(self, cart, customer_id, customer_name, delivery_address,
                    payment_method, payment_details=None, today=None):
        """Turn ``cart`` into a pending order and persist it.

        Only the last four card digits and the cardholder name are kept for
        card payments. ``today`` overrides the date used for the expiry check.

        Raises EmptyCart, ValidationError or StoreError.
        """
        if cart.is_empty:
            raise EmptyCart()

        errors = validate_checkout(delivery_address, payment_method, payment_details, today=today)
        if errors:
            raise ValidationError(errors)

        totals = compute_totals(cart.subtotal())
        order = Order(
            order_number=self._new_order_number(),
            customer_id=customer_id,
            customer_name=customer_name,
            total_amount=totals.total,
            status=STATUS_PENDING,
            delivery_address=str(delivery_address).strip(),
            payment_method=payment_method,
            created_at=datetime.utcnow(),
        )
        if payment_method == PAYMENT_CARD:
            order.payment_card_last4 = clean_card_number(str(payment_details['card_number']))[-4:]
            order.payment_cardholder_name = str(payment_details['cardholder_name']).strip()

        for line in cart:
            order.lines.append(OrderLine(
                food_id=line.item_id,
                name=line.name,
                unit_price=line.unit_price,
                quantity=line.quantity,
            ))

        db.session.add(order)
        self._commit('place your order')

        logger.info('Order %s placed by customer %s: %d lines, total %s',
                    order.order_number, customer_id, len(order.lines), totals.total)
        return order

    def transition_status(self, order_number, new_status):
        """Move an order to ``new_status`` if the status table allows it.

        Returns the new status. Raises OrderNotFound, InvalidTransition or
        StoreError; on any of them the stored status is left unchanged.
        """
        order = Order.query.filter_by(order_number=order_number).first()
        if order is None:
            raise OrderNotFound(order_number)

        if new_status not in ORDER_STATUSES or not order.can_transition_to(new_status):
            logger.warning('Rejected status change for %s: %s -> %s',
                           order_number, order.status, new_status)
            raise InvalidTransition(order.status, new_status)

        previous = order.status
        order.status = new_status
        order.status_updated_at = datetime.utcnow()
        self._commit('update the order status')

        logger.info('Order %s moved from %s to %s', order_number, previous, new_status)
        return order.status

    def get_order(self, order_number, customer_id=None):
        """Fetch one order; with ``customer_id`` only that customer's order is visible."""
        query = Order.query.filter_by(order_number=order_number)
        if customer_id is not None:
            query = query.filter_by(customer_id=customer_id)
        order = query.first()
        if order is None:
            raise OrderNotFound(order_number)
        return order

    def list_orders(self, customer_id=None, status=None, search=None):
        """Orders newest first, optionally scoped to a customer and filtered.

        ``search`` matches the order number or the customer's name,
        case-insensitively. ``status`` of None, '' or 'all' means no filter.
        """
        query = Order.query

        if customer_id is not None:
            query = query.filter(Order.customer_id == customer_id)

        if status and status != 'all':
            query = query.filter(Order.status == status)

        search = (search or '').strip()
        if search:
            query = query.filter(
                Order.order_number.icontains(search, autoescape=True) |
                Order.customer_name.icontains(search, autoescape=True)
            )

        return query.order_by(Order.created_at.desc(), Order.id.desc()).all()

    def order_counts_by_status(self):
        counts = {status: 0 for status in ORDER_STATUSES}
        rows = db.session.query(Order.status, func.count(Order.id)).group_by(Order.status).all()
        for status, count in rows:
            counts[status] = count
        return counts

    def revenue(self):
        """Sum of order totals, excluding cancelled orders."""
        total = db.session.query(
            func.sum(Order.total_amount)
        ).filter(Order.status != STATUS_CANCELLED).scalar()
        return Decimal(str(total)) if total is not None else Decimal('0')

    def _new_order_number(self):
        for _ in range(MAX_ORDER_NUMBER_ATTEMPTS):
            order_number = generate_order_id()
            if Order.query.filter_by(order_number=order_number).first() is None:
                return order_number
        raise StoreError('generate an order number')

    def _commit(self, action):
        try:
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.exception('Store write failed while trying to %s', action)
            raise StoreError(action) from e
