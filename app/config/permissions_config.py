"""
Permissions and Roles Configuration
This config defines the permission matrix for every table and storage namespace.
It is the single source for authorization: the API dependencies consult it before
any data access, /auth/me exports it for UI gating, and the RLS policies in
supabase/migrations mirror it.
"""

from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Union


class AppRole(str, Enum):
    ADMIN = "admin"
    GESTOR = "gestor"
    VISUALIZADOR = "visualizador"


class Operation(str, Enum):
    SELECT = "select"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


DEFAULT_ROLE = AppRole.VISUALIZADOR

# Rule markers besides explicit role sets
AUTHENTICATED = "authenticated"
OWNER = "owner"

ADMIN_ONLY: FrozenSet[AppRole] = frozenset({AppRole.ADMIN})
EDITORS: FrozenSet[AppRole] = frozenset({AppRole.ADMIN, AppRole.GESTOR})

Rule = Optional[Union[str, FrozenSet[AppRole]]]

# Tables holding business entities
DOMAIN_TABLES = ("suppliers", "contracts", "documents", "obligations", "payments")

# Object storage namespace for document binaries (bucket contracts-documents)
STORAGE = "storage"


def _domain_rules() -> Dict[Operation, Rule]:
    return {
        Operation.SELECT: AUTHENTICATED,
        Operation.INSERT: EDITORS,
        Operation.UPDATE: EDITORS,
        Operation.DELETE: ADMIN_ONLY,
    }


# None means the operation is never allowed through the application
POLICY_MATRIX: Dict[str, Dict[Operation, Rule]] = {
    "profiles": {
        Operation.SELECT: AUTHENTICATED,
        Operation.INSERT: None,  # system-provisioned
        Operation.UPDATE: OWNER,
        Operation.DELETE: None,
    },
    "user_roles": {
        Operation.SELECT: AUTHENTICATED,
        Operation.INSERT: ADMIN_ONLY,
        Operation.UPDATE: ADMIN_ONLY,
        Operation.DELETE: ADMIN_ONLY,
    },
    **{table: _domain_rules() for table in DOMAIN_TABLES},
    "audit_logs": {
        Operation.SELECT: ADMIN_ONLY,
        Operation.INSERT: AUTHENTICATED,  # recorder path
        Operation.UPDATE: None,
        Operation.DELETE: None,
    },
    "notification_settings": {
        Operation.SELECT: OWNER,
        Operation.INSERT: OWNER,
        Operation.UPDATE: OWNER,
        Operation.DELETE: None,
    },
    STORAGE: {
        Operation.SELECT: AUTHENTICATED,
        Operation.INSERT: EDITORS,
        Operation.UPDATE: None,
        Operation.DELETE: ADMIN_ONLY,
    },
}

TABLES = tuple(POLICY_MATRIX.keys())


def coerce_role(value: Union[str, AppRole, None]) -> Optional[AppRole]:
    """Turn a raw role value into AppRole; unknown values become None."""
    if value is None or isinstance(value, AppRole):
        return value
    try:
        return AppRole(value)
    except ValueError:
        return None


def get_rule(table: str, operation: Union[str, Operation]) -> Rule:
    if table not in POLICY_MATRIX:
        raise KeyError(f"Unknown table: {table}")
    return POLICY_MATRIX[table][Operation(operation)]


def is_allowed(
    role: Union[str, AppRole, None],
    operation: Union[str, Operation],
    table: str,
    is_owner: bool = False,
) -> bool:
    """
    Authorization predicate for an authenticated actor.

    role is None when the actor's role could not be resolved; role-gated rules
    then deny, while rules open to any authenticated actor still allow.
    Owner rules depend only on is_owner.
    """
    rule = get_rule(table, operation)
    if rule is None:
        return False
    if rule == AUTHENTICATED:
        return True
    if rule == OWNER:
        return is_owner
    resolved = coerce_role(role)
    return resolved is not None and resolved in rule


def can_edit(role: Union[str, AppRole, None]) -> bool:
    return coerce_role(role) in EDITORS


def is_admin(role: Union[str, AppRole, None]) -> bool:
    return coerce_role(role) == AppRole.ADMIN


def permission_name(table: str, operation: Union[str, Operation]) -> str:
    return f"{table}:{Operation(operation).value}"


def permissions_for_role(role: Union[str, AppRole, None]) -> List[str]:
    """Permission names granted to a role, excluding owner-scoped rules."""
    granted = []
    for table, rules in POLICY_MATRIX.items():
        for operation in Operation:
            rule = rules[operation]
            if rule is None or rule == OWNER:
                continue
            if is_allowed(role, operation, table):
                granted.append(permission_name(table, operation))
    return sorted(granted)


def _describe(rule: Rule) -> str:
    if rule is None:
        return "denied"
    if rule in (AUTHENTICATED, OWNER):
        return rule
    return ",".join(sorted(r.value for r in rule))


# Generate permission matrix
def get_permission_matrix():
    """
    Returns a dictionary describing the policy matrix and the grants per role
    Format: {
        "tables": {
            "contracts": {"select": "authenticated", "insert": "admin,gestor", ...},
            ...
        },
        "roles": {
            "admin": ["audit_logs:insert", "audit_logs:select", ...],
            ...
        }
    }
    """
    tables = {
        table: {operation.value: _describe(rules[operation]) for operation in Operation}
        for table, rules in POLICY_MATRIX.items()
    }
    roles = {role.value: permissions_for_role(role) for role in AppRole}
    return {
        "tables": tables,
        "roles": roles
    }


# Export the matrix for use in scripts and /auth/me
PERMISSION_MATRIX = get_permission_matrix()
