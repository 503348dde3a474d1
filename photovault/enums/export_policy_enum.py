from enum import StrEnum

class ExportPolicy(StrEnum):
    """Política de nombres al exportar una copia fuera del baúl."""
    ORIGINAL_NAME = "ORIGINAL_NAME"
    VAULT_NAME = "VAULT_NAME"

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return self.value
