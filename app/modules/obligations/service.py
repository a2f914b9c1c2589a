from app.core.crud import DomainTableService
from app.modules.obligations.schemas import ObligationResponse, ObligationStatus
from datetime import datetime, timezone


class ObligationService(DomainTableService):
    table = "obligations"
    response_model = ObligationResponse
    order_by = "due_date"
    order_desc = False
    not_found_message = "Obrigação não encontrada."

    def apply_filters(self, query, filters):
        if "contract_id" in filters:
            query = query.eq("contract_id", filters["contract_id"])
        if "status" in filters:
            statuses = filters["status"]
            if isinstance(statuses, (list, tuple)):
                query = query.in_("status", [ObligationStatus(s).value for s in statuses])
            else:
                query = query.eq("status", ObligationStatus(statuses).value)
        return query

    def prepare_insert(self, session, row):
        if row.get("status") == ObligationStatus.CONCLUIDO.value:
            row["completed_at"] = datetime.now(timezone.utc).isoformat()
        return row

    def prepare_update(self, old, changes):
        completing = changes.get("status") == ObligationStatus.CONCLUIDO.value
        if completing and not changes.get("completed_at") and not old.get("completed_at"):
            changes["completed_at"] = datetime.now(timezone.utc).isoformat()
        return changes
