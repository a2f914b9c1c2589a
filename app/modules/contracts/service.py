from app.core.crud import DomainTableService, search_clauses
from app.core.errors import validation_error
from app.modules.contracts.schemas import ContractResponse, ContractStatus
from app.modules.suppliers.service import SupplierService
from datetime import date, timedelta
from typing import List


class ContractService(DomainTableService):
    table = "contracts"
    response_model = ContractResponse
    not_found_message = "Contrato não encontrado."

    def apply_filters(self, query, filters):
        if "status" in filters:
            query = query.eq("status", ContractStatus(filters["status"]).value)
        if "supplier_id" in filters:
            query = query.eq("supplier_id", filters["supplier_id"])
        term = (filters.get("search") or "").strip()
        if term:
            clauses = search_clauses(["contract_number", "title"], term)
            supplier_ids = SupplierService(self.supabase, self.audit).ids_matching_name(term)
            if supplier_ids:
                clauses.append(f"supplier_id.in.({','.join(supplier_ids)})")
            query = query.or_(",".join(clauses))
        if "expiring_within_days" in filters:
            today = date.today()
            until = today + timedelta(days=int(filters["expiring_within_days"]))
            query = query.eq("status", ContractStatus.ATIVO.value)\
                .gte("end_date", today.isoformat())\
                .lte("end_date", until.isoformat())
        return query

    def prepare_update(self, old, changes):
        start = changes.get("start_date", old.get("start_date"))
        end = changes.get("end_date", old.get("end_date"))
        if start and end and str(end) < str(start):
            raise validation_error("A data de término não pode ser anterior à data de início.")
        return changes

    def list_expiring(self, days: int, limit: int = 100) -> List[ContractResponse]:
        """Active contracts ending within the next `days` days, soonest first"""
        return self.list(limit=limit, order_by="end_date", desc=False, expiring_within_days=days)

