from __future__ import annotations

import pytest

from engine.installments import apply_installment
from engine.pagination import DEFAULT_PROFILE, paginate_with_profile
from engine.tokens import emphasize
from firms import get_firm
from models import (
    DocumentRecordMismatchError,
    DocumentType,
    FinancialTableBlock,
    IndividualRecord,
    OrganizationRecord,
    ParagraphBlock,
    PartnershipRecord,
    SignatureBlock,
    SpacerBlock,
    TitleBlock,
)
from reporting.clauses import TEMPLATES
from reporting.document_builder import build_blocks, financial_rows

FIRM = get_firm("default")


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
        "installment_due_day": "10",
        "contract_date": "2026-10-19",
    }
    data.update(overrides)
    return IndividualRecord(**data)


def _company() -> OrganizationRecord:
    return OrganizationRecord(
        corporate_name="ACME Comércio Ltda",
        cnpj="12.345.678/0001-90",
        hq_address="Av. Central, 100",
        hq_city="Rio de Janeiro",
        hq_state="RJ",
        representative_name="João Souza",
        representative_cpf="987.654.321-00",
        total_value="500000",
        down_payment="100000",
        installment_count="8",
    )


def _kinds(blocks):
    return [b.kind for b in blocks]


@pytest.mark.parametrize(
    "document_type,record",
    [
        (DocumentType.FEE_AGREEMENT_INDIVIDUAL, _person()),
        (DocumentType.FEE_AGREEMENT_ORGANIZATION, _company()),
    ],
)
def test_fee_agreements_have_one_table_and_terminal_signature(document_type, record):
    blocks = build_blocks(document_type, record, firm=FIRM)
    assert sum(isinstance(b, FinancialTableBlock) for b in blocks) == 1
    assert sum(isinstance(b, SignatureBlock) for b in blocks) == 1
    assert isinstance(blocks[-1], SignatureBlock)
    assert isinstance(blocks[0], TitleBlock) and blocks[0].level == 1


@pytest.mark.parametrize(
    "document_type,record",
    [
        (DocumentType.POWER_OF_ATTORNEY_INDIVIDUAL, _person()),
        (DocumentType.POWER_OF_ATTORNEY_ORGANIZATION, _company()),
        (DocumentType.INDIGENCY_DECLARATION, _person()),
        (DocumentType.PARTNERSHIP_AGREEMENT, PartnershipRecord(manager="Dr. A", partner="Dra. B")),
    ],
)
def test_other_documents_have_no_table(document_type, record):
    blocks = build_blocks(document_type, record, firm=FIRM)
    assert "financial_table" not in _kinds(blocks)
    assert _kinds(blocks).count("signature") == 1
    assert blocks[-1].kind == "signature"


def test_mismatched_record_kind_is_rejected():
    with pytest.raises(DocumentRecordMismatchError):
        build_blocks(DocumentType.FEE_AGREEMENT_ORGANIZATION, _person(), firm=FIRM)
    with pytest.raises(DocumentRecordMismatchError):
        build_blocks(DocumentType.INDIGENCY_DECLARATION, _company(), firm=FIRM)


def test_build_is_referentially_transparent():
    first = build_blocks(DocumentType.FEE_AGREEMENT_INDIVIDUAL, _person(), firm=FIRM)
    second = build_blocks(DocumentType.FEE_AGREEMENT_INDIVIDUAL, _person(), firm=FIRM)
    assert first == second


def test_blocks_are_immutable():
    block = build_blocks(DocumentType.POWER_OF_ATTORNEY_INDIVIDUAL, _person(), firm=FIRM)[1]
    with pytest.raises(Exception):
        block.cost = 1.0


def test_paragraph_cost_grows_with_text_length():
    short = build_blocks(DocumentType.POWER_OF_ATTORNEY_INDIVIDUAL, _person(name="Ana"), firm=FIRM)
    long = build_blocks(
        DocumentType.POWER_OF_ATTORNEY_INDIVIDUAL,
        _person(name="Ana " + "de Souza " * 40),
        firm=FIRM,
    )
    by_key_short = {b.key: b for b in short}
    by_key_long = {b.key: b for b in long}
    assert by_key_long["outorgante"].cost > by_key_short["outorgante"].cost
    assert by_key_long["poderes_gerais"].cost == by_key_short["poderes_gerais"].cost


def test_table_and_signature_cost_more_than_any_paragraph():
    blocks = build_blocks(DocumentType.FEE_AGREEMENT_INDIVIDUAL, _person(), firm=FIRM)
    paragraph_costs = [b.cost for b in blocks if isinstance(b, ParagraphBlock)]
    table = next(b for b in blocks if isinstance(b, FinancialTableBlock))
    signature = blocks[-1]
    assert table.cost > max(paragraph_costs)
    assert signature.cost > max(paragraph_costs)


def test_paragraph_markup_is_substituted_and_escaped():
    blocks = build_blocks(
        DocumentType.POWER_OF_ATTORNEY_INDIVIDUAL,
        _person(name="Maria <script>"),
        firm=FIRM,
    )
    outorgante = next(b for b in blocks if b.key == "outorgante")
    assert "/NOME/" not in outorgante.text
    assert emphasize("Maria <script>") in outorgante.text
    assert "<script>" not in outorgante.markup
    outorgado = next(b for b in blocks if b.key == "outorgado")
    assert outorgado.highlighted
    assert emphasize(FIRM.attorney_name) in outorgado.text
    assert emphasize(FIRM.bar_registration) in outorgado.text


def test_clause_override_is_substituted():
    blocks = build_blocks(
        DocumentType.FEE_AGREEMENT_INDIVIDUAL,
        _person(),
        firm=FIRM,
        overrides={"clausula_1": "Cláusula 1ª. Consultoria para /NOME/ & família."},
    )
    clause = next(b for b in blocks if b.key == "clausula_1")
    assert clause.text == f"Cláusula 1ª. Consultoria para {emphasize('Maria da Silva')} &amp; família."


def test_financial_rows_follow_derived_installment():
    rows = {r.label: r.value for r in financial_rows(apply_installment(_person()))}
    assert rows["Valor total"] == "R$ 1.000,00"
    assert rows["Entrada"] == "R$ 200,00"
    assert rows["Parcelas"] == "4x de R$ 200,00"
    assert rows["Vencimento"] == "Todo dia 10"
    assert rows["Forma de pagamento"] == "BOLETO BANCÁRIO"


def test_signature_names_resolved_plainly():
    blocks = build_blocks(DocumentType.FEE_AGREEMENT_ORGANIZATION, _company(), firm=FIRM)
    signature = blocks[-1]
    assert isinstance(signature, SignatureBlock)
    assert [s.role for s in signature.signatories] == ["OUTORGANTE", "OUTORGADO"]
    assert signature.signatories[0].name == "ACME Comércio Ltda"
    assert signature.signatories[0].detail == "p.p. João Souza"
    assert signature.signatories[1].name == FIRM.attorney_name
    assert signature.place_and_date.startswith("Rio de Janeiro, ")


def test_indigency_declaration_keeps_spacer_before_signature():
    blocks = build_blocks(DocumentType.INDIGENCY_DECLARATION, _person(), firm=FIRM)
    assert isinstance(blocks[-2], SpacerBlock)
    local = next(b for b in blocks if b.key == "local")
    assert emphasize("19") in local.text and emphasize("2026") in local.text


def test_full_fee_agreement_paginates_within_profile():
    blocks = build_blocks(DocumentType.FEE_AGREEMENT_INDIVIDUAL, apply_installment(_person()), firm=FIRM)
    pages = paginate_with_profile(blocks, DEFAULT_PROFILE)
    assert len(pages) >= 2
    assert [b for p in pages for b in p.blocks] == blocks
    for page in pages:
        if page.overflow is None:
            assert page.cost <= DEFAULT_PROFILE.capacity
        else:
            assert page.overflow == "signature_tolerance"

def test_templates_only_use_known_tokens():
    from engine.tokens import find_unknown_tokens

    firm_tokens = FIRM.token_values().keys()
    for template in TEMPLATES.values():
        for segment in template.segments:
            assert find_unknown_tokens(segment.text, firm_tokens) == [], segment.key
