from enum import StrEnum
from typing import List

class ReservedAlbum(StrEnum):
    """
    Nombres de álbumes que el sistema gestiona internamente.

    RESTORED: álbum de respaldo que recibe las fotos huérfanas al restaurar
        o al borrar su álbum padre. Se crea bajo demanda y es visible.
    BIN_HOLDING: álbum centinela para fotos de papelera sin álbum real.
        Nunca se muestra al usuario.
    """
    RESTORED = "Restored"
    BIN_HOLDING = "__DUMMY_BIN_ALBUM__"

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return self.value

    @staticmethod
    def get_hidden_names() -> List[str]:
        return [ReservedAlbum.BIN_HOLDING.value]
