from app.core.crud import DomainTableService, search_clauses
from app.modules.suppliers.schemas import SupplierResponse

SEARCH_COLUMNS = ["name", "cnpj", "email"]


class SupplierService(DomainTableService):
    table = "suppliers"
    response_model = SupplierResponse
    order_by = "name"
    order_desc = False
    not_found_message = "Fornecedor não encontrado."

    def apply_filters(self, query, filters):
        if "is_active" in filters:
            query = query.eq("is_active", filters["is_active"])
        if "category" in filters:
            query = query.eq("category", filters["category"])
        term = (filters.get("search") or "").strip()
        if term:
            query = query.or_(",".join(search_clauses(SEARCH_COLUMNS, term)))
        return query

    def ids_matching_name(self, term: str) -> list:
        """Ids of suppliers whose name contains term"""
        result = self.supabase.table(self.table)\
            .select("id")\
            .or_(",".join(search_clauses(["name"], term)))\
            .execute()
        return [row["id"] for row in result.data or []]
