"""In-repo firm registry for development and white-labeling."""
from __future__ import annotations

from models_firm import FirmConfig

FIRMS: dict[str, FirmConfig] = {
    "default": FirmConfig(
        firm_id="default",
        firm_name="FB Advocacia & Consultoria",
        monogram="FB",
        attorney_name="Flafson Borges Barbosa",
        bar_registration="OAB/RJ 213.777",
        email="suporte@flafsonadvocacia.com",
        phone="(21) 99173-5421",
        address="Av. Maria Teresa, nº 75, sala 328 - Business Completo - Campo Grande - RJ",
    ),
    "sample": FirmConfig(
        firm_id="sample",
        firm_name="Exemplo Sociedade de Advogados",
        monogram="ES",
        attorney_name="Ana Exemplo de Souza",
        bar_registration="OAB/SP 000.001",
        email="contato@exemplo.adv.br",
        phone="(11) 4000-0000",
        address="Rua Exemplo, nº 100 - Centro - São Paulo - SP",
        accent_color="#1e3a5f",
    ),
}


def get_firm(firm_id: str) -> FirmConfig | None:
    return FIRMS.get(firm_id)


def list_firms() -> list[FirmConfig]:
    return list(FIRMS.values())
