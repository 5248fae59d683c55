from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, List, Literal, Optional, Tuple, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from reporting.format_utils import format_currency_input


class RecordKind(str, Enum):
    INDIVIDUAL = "individual"
    ORGANIZATION = "organization"
    PARTNERSHIP = "partnership"


class DocumentType(str, Enum):
    FEE_AGREEMENT_INDIVIDUAL = "fee_agreement_individual"
    FEE_AGREEMENT_ORGANIZATION = "fee_agreement_organization"
    POWER_OF_ATTORNEY_INDIVIDUAL = "power_of_attorney_individual"
    POWER_OF_ATTORNEY_ORGANIZATION = "power_of_attorney_organization"
    INDIGENCY_DECLARATION = "indigency_declaration"
    PARTNERSHIP_AGREEMENT = "partnership_agreement"


DOCUMENT_RECORD_KINDS: dict[DocumentType, tuple[RecordKind, ...]] = {
    DocumentType.FEE_AGREEMENT_INDIVIDUAL: (RecordKind.INDIVIDUAL,),
    DocumentType.FEE_AGREEMENT_ORGANIZATION: (RecordKind.ORGANIZATION,),
    DocumentType.POWER_OF_ATTORNEY_INDIVIDUAL: (RecordKind.INDIVIDUAL,),
    DocumentType.POWER_OF_ATTORNEY_ORGANIZATION: (RecordKind.ORGANIZATION,),
    DocumentType.INDIGENCY_DECLARATION: (RecordKind.INDIVIDUAL,),
    DocumentType.PARTNERSHIP_AGREEMENT: (RecordKind.PARTNERSHIP,),
}


class DocumentBundle(str, Enum):
    INDIVIDUAL_BUNDLE = "individual_bundle"
    ORGANIZATION_BUNDLE = "organization_bundle"


BUNDLE_DOCUMENTS: dict[DocumentBundle, tuple[DocumentType, ...]] = {
    DocumentBundle.INDIVIDUAL_BUNDLE: (
        DocumentType.FEE_AGREEMENT_INDIVIDUAL,
        DocumentType.POWER_OF_ATTORNEY_INDIVIDUAL,
        DocumentType.INDIGENCY_DECLARATION,
    ),
    DocumentBundle.ORGANIZATION_BUNDLE: (
        DocumentType.FEE_AGREEMENT_ORGANIZATION,
        DocumentType.POWER_OF_ATTORNEY_ORGANIZATION,
    ),
}


class PaymentMethod(str, Enum):
    BOLETO = "BOLETO BANCÁRIO"
    BANK_TRANSFER = "TRANSFERÊNCIA BANCÁRIA"
    CREDIT_CARD = "CARTÃO DE CRÉDITO"
    CASH = "À VISTA"
    PIX = "PIX"


ONE_TIME_PAYMENT_METHODS = frozenset({PaymentMethod.CREDIT_CARD, PaymentMethod.CASH, PaymentMethod.PIX})


class DocumentRecordMismatchError(ValueError):
    """Document type was asked to render a record kind it does not accept."""

    def __init__(self, document_type: DocumentType, kind: RecordKind):
        allowed = ", ".join(k.value for k in DOCUMENT_RECORD_KINDS[document_type])
        super().__init__(
            f"{document_type.value} accepts {allowed} records, got {kind.value}"
        )
        self.document_type = document_type
        self.kind = kind


@dataclass(frozen=True)
class PartyView:
    """
    Flat view of a record for token resolution.

    Own fields and representative fields are kept apart; resolvers decide the
    precedence, so a field the variant does not have is simply "".
    """

    name: str = ""
    tax_id: str = ""
    marital_status: str = ""
    profession: str = ""
    nationality: str = ""
    street: str = ""
    complement: str = ""
    district: str = ""
    postal_code: str = ""
    city: str = ""
    state: str = ""
    process_number: str = ""
    corporate_name: str = ""
    cnpj: str = ""
    representative_name: str = ""
    representative_tax_id: str = ""
    representative_marital_status: str = ""
    representative_profession: str = ""
    representative_nationality: str = ""
    representative_street: str = ""
    representative_postal_code: str = ""
    representative_city: str = ""
    representative_state: str = ""
    total_value: str = ""
    down_payment: str = ""
    down_payment_date: str = ""
    installment_count: str = ""
    installment_amount: str = ""
    installment_due_day: str = ""
    payment_method: str = ""
    contract_date: str = ""
    partner_name: str = ""
    partner_bar_id: str = ""
    action_type: str = ""
    percentage: str = ""
    clients: Tuple[Tuple[str, str], ...] = ()


class _RecordBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", str_strip_whitespace=True)

    process_number: str = Field(default="", validation_alias=AliasChoices("process_number", "numProcesso"))
    contract_date: str = Field(default="", validation_alias=AliasChoices("contract_date", "data"))


class _ContractTerms(_RecordBase):
    """Financial fields shared by fee agreements. Currency strings are cents-normalized."""

    total_value: str = Field(default="", validation_alias=AliasChoices("total_value", "valorTotal"))
    down_payment: str = Field(default="", validation_alias=AliasChoices("down_payment", "entrada"))
    down_payment_date: str = Field(default="", validation_alias=AliasChoices("down_payment_date", "dataEntrada"))
    installment_count: str = Field(default="", validation_alias=AliasChoices("installment_count", "vezesParcelas"))
    installment_amount: str = Field(default="", validation_alias=AliasChoices("installment_amount", "valorParcela"))
    installment_due_day: str = Field(
        default="", validation_alias=AliasChoices("installment_due_day", "dataPagamentoParcelas")
    )
    payment_method: str = Field(
        default=PaymentMethod.BOLETO.value, validation_alias=AliasChoices("payment_method", "formaPagamento")
    )

    @field_validator("total_value", "down_payment", "installment_amount", mode="before")
    @classmethod
    def normalize_currency(cls, v: Any) -> str:
        return format_currency_input(v)

    @field_validator("installment_count", "installment_due_day", mode="before")
    @classmethod
    def stringify(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v)

    def _terms(self) -> dict[str, str]:
        return {
            "process_number": self.process_number,
            "contract_date": self.contract_date,
            "total_value": self.total_value,
            "down_payment": self.down_payment,
            "down_payment_date": self.down_payment_date,
            "installment_count": self.installment_count,
            "installment_amount": self.installment_amount,
            "installment_due_day": self.installment_due_day,
            "payment_method": self.payment_method,
        }


class IndividualRecord(_ContractTerms):
    kind: Literal["individual"] = "individual"
    name: str = Field(default="", validation_alias=AliasChoices("name", "nome"))
    marital_status: str = Field(default="", validation_alias=AliasChoices("marital_status", "estadoCivil"))
    profession: str = Field(default="", validation_alias=AliasChoices("profession", "profissao"))
    nationality: str = Field(default="", validation_alias=AliasChoices("nationality", "nacionalidade"))
    cpf: str = ""
    street: str = Field(default="", validation_alias=AliasChoices("street", "rua"))
    complement: str = Field(default="", validation_alias=AliasChoices("complement", "complemento"))
    postal_code: str = Field(default="", validation_alias=AliasChoices("postal_code", "cep"))
    city: str = Field(default="", validation_alias=AliasChoices("city", "cidade"))
    state: str = Field(default="", validation_alias=AliasChoices("state", "estado"))

    @property
    def record_kind(self) -> RecordKind:
        return RecordKind.INDIVIDUAL

    @property
    def display_name(self) -> str:
        return self.name

    def party_view(self) -> PartyView:
        return PartyView(
            name=self.name,
            tax_id=self.cpf,
            marital_status=self.marital_status,
            profession=self.profession,
            nationality=self.nationality,
            street=self.street,
            complement=self.complement,
            postal_code=self.postal_code,
            city=self.city,
            state=self.state,
            **self._terms(),
        )


class OrganizationRecord(_ContractTerms):
    kind: Literal["organization"] = "organization"
    corporate_name: str = Field(default="", validation_alias=AliasChoices("corporate_name", "razaoSocial"))
    cnpj: str = ""
    hq_address: str = Field(default="", validation_alias=AliasChoices("hq_address", "enderecoSede"))
    hq_district: str = Field(default="", validation_alias=AliasChoices("hq_district", "bairroSede"))
    hq_city: str = Field(default="", validation_alias=AliasChoices("hq_city", "cidadeSede"))
    hq_state: str = Field(default="", validation_alias=AliasChoices("hq_state", "estadoSede"))
    hq_postal_code: str = Field(default="", validation_alias=AliasChoices("hq_postal_code", "cepSede"))
    representative_name: str = Field(
        default="", validation_alias=AliasChoices("representative_name", "nomeRepresentante")
    )
    representative_nationality: str = Field(
        default="", validation_alias=AliasChoices("representative_nationality", "nacionalidadeRep")
    )
    representative_profession: str = Field(
        default="", validation_alias=AliasChoices("representative_profession", "profissaoRep")
    )
    representative_marital_status: str = Field(
        default="", validation_alias=AliasChoices("representative_marital_status", "estadoCivilRep")
    )
    representative_cpf: str = Field(default="", validation_alias=AliasChoices("representative_cpf", "cpfRep"))
    representative_address: str = Field(
        default="", validation_alias=AliasChoices("representative_address", "enderecoRep")
    )
    representative_city: str = Field(default="", validation_alias=AliasChoices("representative_city", "cidadeRep"))
    representative_state: str = Field(
        default="", validation_alias=AliasChoices("representative_state", "estadoRep")
    )
    representative_postal_code: str = Field(
        default="", validation_alias=AliasChoices("representative_postal_code", "cepRep")
    )

    @property
    def record_kind(self) -> RecordKind:
        return RecordKind.ORGANIZATION

    @property
    def display_name(self) -> str:
        return self.corporate_name

    def party_view(self) -> PartyView:
        return PartyView(
            name=self.corporate_name,
            corporate_name=self.corporate_name,
            cnpj=self.cnpj,
            street=self.hq_address,
            district=self.hq_district,
            postal_code=self.hq_postal_code,
            city=self.hq_city,
            state=self.hq_state,
            representative_name=self.representative_name,
            representative_tax_id=self.representative_cpf,
            representative_marital_status=self.representative_marital_status,
            representative_profession=self.representative_profession,
            representative_nationality=self.representative_nationality,
            representative_street=self.representative_address,
            representative_postal_code=self.representative_postal_code,
            representative_city=self.representative_city,
            representative_state=self.representative_state,
            **self._terms(),
        )


class PartnershipClient(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    id: str = ""
    name: str = Field(default="", validation_alias=AliasChoices("name", "nome"))
    cpf: str = ""


class PartnershipRecord(_RecordBase):
    """Fee-sharing agreement between the managing attorney and a partner attorney."""

    kind: Literal["partnership"] = "partnership"
    manager: str = Field(default="", validation_alias=AliasChoices("manager", "gestor"))
    partner: str = Field(default="", validation_alias=AliasChoices("partner", "parceiro"))
    partner_bar_id: str = Field(default="", validation_alias=AliasChoices("partner_bar_id", "oabParceiro"))
    clients: List[PartnershipClient] = Field(
        default_factory=list, validation_alias=AliasChoices("clients", "clientes")
    )
    action_type: str = Field(default="", validation_alias=AliasChoices("action_type", "tipoAcao"))
    percentage: str = Field(default="", validation_alias=AliasChoices("percentage", "percentual"))
    signing_state: str = Field(default="", validation_alias=AliasChoices("signing_state", "estadoAssinatura"))
    signing_date: str = Field(default="", validation_alias=AliasChoices("signing_date", "dataAssinatura"))

    @field_validator("percentage", mode="before")
    @classmethod
    def stringify_percentage(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v)

    @property
    def record_kind(self) -> RecordKind:
        return RecordKind.PARTNERSHIP

    @property
    def display_name(self) -> str:
        return self.manager

    def party_view(self) -> PartyView:
        return PartyView(
            name=self.manager,
            partner_name=self.partner,
            partner_bar_id=self.partner_bar_id,
            action_type=self.action_type,
            percentage=self.percentage,
            state=self.signing_state,
            process_number=self.process_number,
            contract_date=self.signing_date or self.contract_date,
            clients=tuple((c.name, c.cpf) for c in self.clients if c.name or c.cpf),
        )


ClientRecord = Annotated[
    Union[IndividualRecord, OrganizationRecord, PartnershipRecord],
    Field(discriminator="kind"),
]


# --- Content blocks ---


class _Block(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str = ""
    cost: float = Field(ge=0.0, description="Estimated vertical space in page points")
    markup: str = ""


class TitleBlock(_Block):
    kind: Literal["title"] = "title"
    text: str
    level: int = Field(default=1, ge=1, le=2)


class ParagraphBlock(_Block):
    kind: Literal["paragraph"] = "paragraph"
    text: str
    highlighted: bool = False


class TableRow(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    value: str


class FinancialTableBlock(_Block):
    kind: Literal["financial_table"] = "financial_table"
    rows: Tuple[TableRow, ...] = ()


class Signatory(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: str
    name: str = ""
    detail: str = ""


class SignatureBlock(_Block):
    kind: Literal["signature"] = "signature"
    place_and_date: str = ""
    signatories: Tuple[Signatory, ...] = ()


class SpacerBlock(_Block):
    kind: Literal["spacer"] = "spacer"


ContentBlock = Annotated[
    Union[TitleBlock, ParagraphBlock, FinancialTableBlock, SignatureBlock, SpacerBlock],
    Field(discriminator="kind"),
]

PageOverflow = Literal["oversized_block", "signature_tolerance"]


class Page(BaseModel):
    """One printed sheet. `overflow` is set only when cost exceeds capacity, with the reason."""

    number: int = Field(ge=1)
    blocks: List[ContentBlock]
    cost: float
    overflow: Optional[PageOverflow] = None


# --- API schemas ---


class RenderRequest(BaseModel):
    document_type: DocumentType
    record: ClientRecord
    viewport_width: float = Field(default=1280.0, gt=0)
    zoom: int = Field(default=100, ge=50, le=200)
    firm_id: Optional[str] = None
    clause_overrides: dict[str, str] = Field(default_factory=dict)


class BundleRequest(BaseModel):
    bundle: DocumentBundle
    record: ClientRecord
    viewport_width: float = Field(default=1280.0, gt=0)
    zoom: int = Field(default=100, ge=50, le=200)
    firm_id: Optional[str] = None


class RenderedDocument(BaseModel):
    document_type: DocumentType
    title: str
    pages: List[Page]
    page_count: int
    capacity: float
    scale: float


class DocumentTypeInfo(BaseModel):
    document_type: DocumentType
    title: str
    record_kinds: List[RecordKind]
    has_financial_table: bool


class InstallmentRequest(BaseModel):
    record: ClientRecord


class InstallmentResponse(BaseModel):
    installment_amount: str
    derived: bool
    base: Optional[float] = None
    amount: Optional[float] = None


class TokenPreviewRequest(BaseModel):
    record: ClientRecord


class TokenPreviewResponse(BaseModel):
    tokens: dict[str, str]
