from __future__ import annotations

import random
import re

import pytest

from engine import tokens
from engine.tokens import (
    TOKEN_TABLE,
    TOKEN_VOCABULARY,
    emphasize,
    find_unknown_tokens,
    render_plain,
    resolve_tokens,
    substitute,
)
from models import IndividualRecord, OrganizationRecord, PartnershipClient, PartnershipRecord
from reporting.format_utils import PLACEHOLDER


def _person(**overrides) -> IndividualRecord:
    data = {
        "name": "Maria da Silva",
        "cpf": "123.456.789-00",
        "marital_status": "casada",
        "profession": "professora",
        "nationality": "brasileira",
        "street": "Rua das Flores, 10",
        "postal_code": "23000-000",
        "city": "Rio de Janeiro",
        "state": "RJ",
        "process_number": "0001234-56.2024.8.19.0001",
        "total_value": "100000",
        "down_payment": "20000",
        "down_payment_date": "2026-10-20",
        "installment_count": "4",
        "installment_amount": "20000",
        "installment_due_day": "10",
        "contract_date": "2026-10-19",
    }
    data.update(overrides)
    return IndividualRecord(**data)


def test_recognized_tokens_are_wrapped_and_every_occurrence_replaced():
    out = substitute("/NOME/ e novamente /NOME/, CPF /CPF/.", _person())
    assert "/NOME/" not in out
    assert out.count(emphasize("Maria da Silva")) == 2
    assert emphasize("123.456.789-00") in out


def test_unknown_token_left_verbatim():
    out = substitute("Campo /TOKEN INEXISTENTE/ ao lado de /NOME/.", _person())
    assert "/TOKEN INEXISTENTE/" in out
    assert emphasize("Maria da Silva") in out


def test_missing_field_resolves_to_placeholder():
    out = substitute("Profissão: /PROFISSÃO/", IndividualRecord())
    assert out == f"Profissão: {emphasize(PLACEHOLDER)}"


def test_formatted_financial_and_date_tokens():
    tokens = resolve_tokens(_person())
    assert tokens["/VALOR TOTAL/"] == "R$ 1.000,00"
    assert tokens["/ENTRADA/"] == "R$ 200,00"
    assert tokens["/VALOR DA PARCELA/"] == "R$ 200,00"
    assert tokens["/DATA DE ENTRADA/"] == "20/10/2026"
    assert tokens["/DATA/"] == "19/10/2026"
    assert (tokens["/DIA/"], tokens["/MÊS/"], tokens["/ANO/"]) == ("19", "10", "2026")


def test_date_tokens_fall_back_without_contract_date():
    tokens = resolve_tokens(_person(contract_date=""))
    assert tokens["/DIA/"] == PLACEHOLDER
    assert tokens["/ANO/"] == PLACEHOLDER


def test_organization_falls_back_to_representative_fields():
    org = OrganizationRecord(
        corporate_name="ACME Comércio Ltda",
        cnpj="12.345.678/0001-90",
        representative_name="João Souza",
        representative_cpf="987.654.321-00",
        representative_marital_status="solteiro",
        representative_city="Niterói",
        hq_address="Av. Central, 100",
    )
    tokens = resolve_tokens(org)
    assert tokens["/NOME/"] == "ACME Comércio Ltda"
    assert tokens["/CPF/"] == "987.654.321-00"
    assert tokens["/ESTADO CIVIL/"] == "solteiro"
    assert tokens["/CIDADE/"] == "Niterói"
    assert tokens["/Rua/"] == "Av. Central, 100"
    assert tokens["/CNPJ/"] == "12.345.678/0001-90"
    assert tokens["/REPRESENTANTE/"] == "João Souza"


def test_organization_hq_fields_take_precedence():
    org = OrganizationRecord(hq_city="Rio de Janeiro", representative_city="Niterói")
    assert resolve_tokens(org)["/CIDADE/"] == "Rio de Janeiro"


def test_substituted_values_are_not_rescanned():
    # A value that looks like a token stays literal, whatever the table order.
    record = _person(name="/CPF/", cpf="")
    out = substitute("/NOME/ /CPF/", record)
    assert out == f"{emphasize('/CPF/')} {emphasize(PLACEHOLDER)}"


def test_values_are_html_escaped():
    out = substitute("/NOME/", _person(name="<b>Maria</b> & Cia"))
    assert "<b>" not in out
    assert "&lt;b&gt;Maria&lt;/b&gt; &amp; Cia" in out


def test_extra_values_resolve_in_the_same_pass():
    out = substitute("/ADVOGADO/ representa /NOME/", _person(), extra_values={"/ADVOGADO/": "Dr. Fulano"})
    assert out == f"{emphasize('Dr. Fulano')} representa {emphasize('Maria da Silva')}"
    assert "/ADVOGADO/" in substitute("/ADVOGADO/", _person())


def test_render_plain_has_no_markup():
    assert render_plain("/NOME/, /CPF/", _person()) == "Maria da Silva, 123.456.789-00"


def test_substitute_is_deterministic():
    template = " ".join(token for token, _ in TOKEN_TABLE)
    assert substitute(template, _person()) == substitute(template, _person())
    assert substitute("", _person()) == ""


def test_resolve_tokens_covers_vocabulary():
    assert set(resolve_tokens(IndividualRecord())) == TOKEN_VOCABULARY
    assert all(value == PLACEHOLDER for value in resolve_tokens(IndividualRecord(payment_method="")).values())


def test_partnership_tokens():
    record = PartnershipRecord(
        manager="Dr. Gestor",
        partner="Dra. Parceira",
        partner_bar_id="RJ 100.200",
        percentage="30",
        clients=[
            PartnershipClient(name="Ana", cpf="111"),
            PartnershipClient(name="Bruno", cpf=""),
            PartnershipClient(),
        ],
        signing_date="2026-01-05",
    )
    tokens = resolve_tokens(record)
    assert tokens["/NOME/"] == "Dr. Gestor"
    assert tokens["/PERCENTUAL/"] == "30%"
    assert tokens["/CLIENTES/"] == f"Ana, CPF nº 111; Bruno, CPF nº {PLACEHOLDER}"
    assert tokens["/DATA/"] == "05/01/2026"


def test_find_unknown_tokens():
    template = "a /FOO/ b /NOME/ c /FOO/ d /BAR BAZ/ OAB/RJ 213.777 e 8.906/94"
    assert find_unknown_tokens(template) == ["/FOO/", "/BAR BAZ/"]
    assert find_unknown_tokens("/ADVOGADO/", known=["/ADVOGADO/"]) == []


@pytest.mark.parametrize("order", ["reversed", "shuffled"])
def test_output_does_not_depend_on_table_order(monkeypatch, order):
    template = " | ".join(token for token, _ in TOKEN_TABLE) + " /DESCONHECIDO/"
    record = _person(name="/CPF/ e /VALOR TOTAL/", profession="/NOME/")
    expected_markup = substitute(template, record)
    expected_plain = render_plain(template, record)

    table = list(TOKEN_TABLE)
    if order == "reversed":
        table.reverse()
    else:
        random.Random(7).shuffle(table)
    # Alternation in table order, no longest-first sorting.
    monkeypatch.setattr(tokens, "_RESOLVERS", dict(table))
    monkeypatch.setattr(tokens, "_BASE_PATTERN", re.compile("|".join(re.escape(t) for t, _ in table)))

    assert substitute(template, record) == expected_markup
    assert render_plain(template, record) == expected_plain
    assert "/DESCONHECIDO/" in expected_plain
