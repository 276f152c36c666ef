from identity_service.infra.sql.sql_directory import SqlDirectory, to_principal
from identity_service.infra.sql.sql_revocation_store import SqlRevocationStore

__all__ = ["SqlDirectory", "SqlRevocationStore", "to_principal"]
