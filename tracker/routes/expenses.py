"""
Vehicle expense routes for EVC Track.
"""

import logging

from flask import Blueprint, jsonify, request

from extensions import RateLimits, limiter
from services import expense_service
from services.app_state import get_state
from utils.validation import validate_expense
from utils.wide_events import track_operation

logger = logging.getLogger(__name__)

expenses_bp = Blueprint("expenses", __name__)


@expenses_bp.route("/expenses/history", methods=["GET"])
@limiter.limit(RateLimits.READ_HEAVY)
def get_expense_history():
    """Get vehicle expenses, newest first."""
    state = get_state()
    return jsonify(expense_service.list_expenses(state.store))


@expenses_bp.route("/expenses/add", methods=["POST"])
@limiter.limit(RateLimits.WRITE_MODERATE)
def add_expense():
    """
    Add a vehicle expense.

    Request body:
        title: Short description (required)
        amount: Amount paid, >= 0 (required)
        expense_date: ISO datetime (defaults to now)
        category: maintenance, repair, insurance, tax or other
        description, odometer, location, currency: optional
    """
    state = get_state()
    fields = validate_expense(request.get_json(silent=True))

    with track_operation("expense_add", mode=state.mode, trace_id=state.identity) as event:
        expense = expense_service.add_expense(state.store, fields)
        event.add_context(expense_id=expense["id"], category=expense["category"])

    return jsonify(expense), 201


@expenses_bp.route("/expenses/<expense_id>", methods=["GET"])
def get_expense(expense_id):
    state = get_state()
    return jsonify(state.store.get_expense(expense_id))


@expenses_bp.route("/expenses/<expense_id>", methods=["PATCH"])
@limiter.limit(RateLimits.WRITE_MODERATE)
def update_expense(expense_id):
    """Update an expense. Only the fields sent are changed."""
    state = get_state()
    fields = validate_expense(request.get_json(silent=True), partial=True)

    with track_operation("expense_edit", mode=state.mode, trace_id=state.identity, expense_id=expense_id):
        expense = expense_service.update_expense(state.store, expense_id, fields)

    return jsonify(expense)


@expenses_bp.route("/expenses/<expense_id>", methods=["DELETE"])
@limiter.limit(RateLimits.WRITE_MODERATE)
def delete_expense(expense_id):
    state = get_state()

    with track_operation("expense_delete", mode=state.mode, trace_id=state.identity, expense_id=expense_id) as event:
        expense_service.delete_expense(state.store, expense_id)
        event.add_business_metric("record_deleted", True)

    return jsonify({"message": f"Expense {expense_id} deleted successfully"})
