"""Law-firm identity printed in clauses, signature blocks and page frames."""
from __future__ import annotations

from pydantic import BaseModel


class FirmConfig(BaseModel):
    """The attorney side (OUTORGADO) of every generated document."""
    firm_id: str
    firm_name: str
    monogram: str = ""
    attorney_name: str
    bar_registration: str
    email: str = ""
    phone: str = ""
    address: str = ""
    accent_color: str = "#9c7d2c"

    def token_values(self) -> dict[str, str]:
        return {
            "/ADVOGADO/": self.attorney_name,
            "/OAB/": self.bar_registration,
            "/EMAIL ESCRITÓRIO/": self.email,
            "/ENDEREÇO ESCRITÓRIO/": self.address,
            "/ESCRITÓRIO/": self.firm_name,
        }
