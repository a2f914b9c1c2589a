from app.core.crud import DomainTableService
from app.modules.payments.schemas import PaymentResponse, PaymentStatus
from datetime import date


class PaymentService(DomainTableService):
    table = "payments"
    response_model = PaymentResponse
    order_by = "due_date"
    order_desc = False
    not_found_message = "Pagamento não encontrado."

    def apply_filters(self, query, filters):
        if "contract_id" in filters:
            query = query.eq("contract_id", filters["contract_id"])
        if "status" in filters:
            query = query.eq("status", PaymentStatus(filters["status"]).value)
        return query

    def prepare_insert(self, session, row):
        if row.get("status") == PaymentStatus.PAGO.value and not row.get("payment_date"):
            row["payment_date"] = date.today().isoformat()
        return row

    def prepare_update(self, old, changes):
        paying = changes.get("status") == PaymentStatus.PAGO.value
        if paying and not changes.get("payment_date") and not old.get("payment_date"):
            changes["payment_date"] = date.today().isoformat()
        return changes
