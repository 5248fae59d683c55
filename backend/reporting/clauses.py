"""
Clause catalog for every document type.

Text is verbatim legal wording; slash tokens (/NOME/, /CPF/ ...) are filled
by engine.tokens, firm tokens (/ADVOGADO/, /OAB/ ...) by the firm profile.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from models import DocumentType


@dataclass(frozen=True)
class Segment:
    kind: str  # title | subtitle | paragraph | table | spacer
    key: str
    text: str = ""
    highlighted: bool = False
    height: float = 0.0


@dataclass(frozen=True)
class SignatoryTemplate:
    role: str
    name: str
    detail: str = ""


@dataclass(frozen=True)
class DocumentTemplate:
    document_type: DocumentType
    title: str
    segments: Tuple[Segment, ...]
    signatories: Tuple[SignatoryTemplate, ...]
    place_and_date: str = "/CIDADE/, /DATA/."

    @property
    def has_financial_table(self) -> bool:
        return any(s.kind == "table" for s in self.segments)


def _title(key: str, text: str) -> Segment:
    return Segment("title", key, text)


def _subtitle(key: str, text: str) -> Segment:
    return Segment("subtitle", key, text)


def _p(key: str, text: str, highlighted: bool = False) -> Segment:
    return Segment("paragraph", key, text, highlighted=highlighted)


OUTORGANTE_INDIVIDUAL = _p(
    "outorgante",
    "OUTORGANTE: /NOME/, /NACIONALIDADE/, /ESTADO CIVIL/, /PROFISSÃO/, inscrito(a) no CPF sob o nº /CPF/, "
    "residente e domiciliado(a) em /Rua/, /CIDADE/ - /ESTADO/, CEP: /CEP/.",
)

OUTORGANTE_ORGANIZATION = _p(
    "outorgante",
    "OUTORGANTE: /RAZÃO SOCIAL/, pessoa jurídica de direito privado, inscrita no CNPJ sob o nº /CNPJ/, "
    "com sede em /Rua/, /BAIRRO/, /CIDADE/ - /ESTADO/, CEP: /CEP/, neste ato representada por "
    "/REPRESENTANTE/, /NACIONALIDADE/, /ESTADO CIVIL/, /PROFISSÃO/, inscrito(a) no CPF sob o nº "
    "/CPF REPRESENTANTE/.",
)

OUTORGADO = _p(
    "outorgado",
    "OUTORGADO: /ADVOGADO/, advogado inscrito na /OAB/, com escritório profissional em "
    "/ENDEREÇO ESCRITÓRIO/, e-mail: /EMAIL ESCRITÓRIO/.",
    highlighted=True,
)

_FEE_CLAUSES: Tuple[Segment, ...] = (
    _p(
        "preambulo",
        "As partes acima identificadas têm, entre si, justo e acertado o presente Contrato de Honorários "
        "Advocatícios, que se regerá pelas cláusulas seguintes e pelas condições descritas no presente.",
    ),
    _subtitle("titulo_objeto", "DO OBJETO"),
    _p(
        "clausula_1",
        "Cláusula 1ª. O presente contrato tem por objeto a prestação de serviços advocatícios pelo OUTORGADO "
        "ao OUTORGANTE na ação de Nº /NUMERO DE PROCESSO/, em todas as suas fases e instâncias, até o "
        "trânsito em julgado da decisão final.",
    ),
    _subtitle("titulo_obrigacoes", "DAS OBRIGAÇÕES"),
    _p(
        "clausula_2",
        "Cláusula 2ª. O OUTORGADO obriga-se a empregar todo o zelo e diligência na defesa dos direitos e "
        "interesses do OUTORGANTE, mantendo-o informado sobre o andamento do processo sempre que solicitado.",
    ),
    _p(
        "clausula_3",
        "Cláusula 3ª. O OUTORGANTE obriga-se a fornecer ao OUTORGADO, com veracidade e em tempo hábil, todos "
        "os documentos e informações necessários ao bom desempenho do mandato, bem como a comunicar qualquer "
        "alteração de endereço, telefone ou e-mail.",
    ),
    _p(
        "clausula_4",
        "Cláusula 4ª. As despesas processuais, custas, emolumentos, perícias e deslocamentos para fora da "
        "comarca não estão incluídos nos honorários e correrão por conta do OUTORGANTE, mediante prévia "
        "comunicação do OUTORGADO.",
    ),
    _subtitle("titulo_honorarios", "DOS HONORÁRIOS"),
    _p(
        "clausula_5",
        "Cláusula 5ª. Pelos serviços descritos na Cláusula 1ª, o OUTORGANTE pagará ao OUTORGADO o valor total "
        "de /VALOR TOTAL/, sendo /ENTRADA/ a título de entrada, com vencimento em /DATA DE ENTRADA/, e o saldo "
        "em /VEZES DE PARCELAS/ parcelas de /VALOR DA PARCELA/, com vencimento todo dia "
        "/DATA DE PAGAMENTO DAS PARCELAS/ de cada mês, por meio de /FORMA DE PAGAMENTO/.",
    ),
    Segment("table", "cronograma"),
    _p(
        "clausula_6",
        "Cláusula 6ª. O atraso no pagamento de qualquer parcela sujeitará o OUTORGANTE à multa de 10% (dez por "
        "cento) sobre o valor devido, acrescido de juros de mora de 1% (um por cento) ao mês e correção "
        "monetária, podendo o OUTORGADO considerar antecipadamente vencidas as parcelas vincendas.",
    ),
    _p(
        "clausula_7",
        "Cláusula 7ª. Além dos honorários ora contratados, pertencem ao OUTORGADO os honorários de sucumbência "
        "eventualmente fixados pelo juízo, nos termos do art. 23 da Lei nº 8.906/94.",
    ),
    _subtitle("titulo_rescisao", "DA RESCISÃO"),
    _p(
        "clausula_8",
        "Cláusula 8ª. O presente contrato poderá ser rescindido por qualquer das partes mediante notificação "
        "prévia por escrito. Em caso de revogação do mandato sem culpa do OUTORGADO, serão devidos "
        "integralmente os honorários ora pactuados.",
    ),
    _subtitle("titulo_foro", "DO FORO"),
    _p(
        "clausula_9",
        "Cláusula 9ª. Fica eleito o foro da Comarca de /CIDADE/ - /ESTADO/ para dirimir quaisquer dúvidas "
        "oriundas do presente contrato, com renúncia a qualquer outro, por mais privilegiado que seja.",
    ),
    _p(
        "fecho",
        "E, por estarem assim justos e contratados, firmam o presente instrumento em duas vias de igual teor "
        "e forma.",
    ),
)

_POA_POWERS: Tuple[Segment, ...] = (
    _subtitle("titulo_poderes", "PODERES"),
    _p(
        "poderes_gerais",
        "Pelo presente instrumento, o OUTORGANTE nomeia e constitui seu bastante procurador o OUTORGADO, a "
        "quem confere amplos poderes da cláusula \"ad judicia et extra\" para o foro em geral, podendo propor "
        "as ações competentes, defendê-lo nas contrárias, acompanhar processos judiciais e administrativos, "
        "interpor recursos e praticar todos os atos necessários ao fiel cumprimento deste mandato.",
    ),
    _p(
        "poderes_especiais",
        "Confere ainda poderes especiais para confessar, reconhecer a procedência do pedido, transigir, "
        "desistir, renunciar ao direito sobre o qual se funda a ação, receber, dar quitação, firmar "
        "compromisso e assinar declaração de hipossuficiência econômica, nos termos do art. 105 do Código de "
        "Processo Civil, podendo substabelecer com ou sem reserva de poderes.",
    ),
    _subtitle("titulo_finalidade", "FINALIDADE"),
    _p("finalidade", "Especialmente para atuar na ação de Nº /NUMERO DE PROCESSO/."),
)

_CLIENT_SIGNATORY = SignatoryTemplate("OUTORGANTE", "/NOME/", "CPF nº /CPF/")
_COMPANY_SIGNATORY = SignatoryTemplate("OUTORGANTE", "/RAZÃO SOCIAL/", "p.p. /REPRESENTANTE/")
_ATTORNEY_SIGNATORY = SignatoryTemplate("OUTORGADO", "/ADVOGADO/", "/OAB/")

TEMPLATES: dict[DocumentType, DocumentTemplate] = {
    DocumentType.FEE_AGREEMENT_INDIVIDUAL: DocumentTemplate(
        document_type=DocumentType.FEE_AGREEMENT_INDIVIDUAL,
        title="CONTRATO DE HONORÁRIOS ADVOCATÍCIOS",
        segments=(
            _title("titulo", "CONTRATO DE HONORÁRIOS ADVOCATÍCIOS"),
            OUTORGANTE_INDIVIDUAL,
            OUTORGADO,
        )
        + _FEE_CLAUSES,
        signatories=(_CLIENT_SIGNATORY, _ATTORNEY_SIGNATORY),
    ),
    DocumentType.FEE_AGREEMENT_ORGANIZATION: DocumentTemplate(
        document_type=DocumentType.FEE_AGREEMENT_ORGANIZATION,
        title="CONTRATO DE HONORÁRIOS ADVOCATÍCIOS",
        segments=(
            _title("titulo", "CONTRATO DE HONORÁRIOS ADVOCATÍCIOS"),
            OUTORGANTE_ORGANIZATION,
            OUTORGADO,
        )
        + _FEE_CLAUSES,
        signatories=(_COMPANY_SIGNATORY, _ATTORNEY_SIGNATORY),
    ),
    DocumentType.POWER_OF_ATTORNEY_INDIVIDUAL: DocumentTemplate(
        document_type=DocumentType.POWER_OF_ATTORNEY_INDIVIDUAL,
        title="PROCURAÇÃO AD JUDICIA ET EXTRA",
        segments=(
            _title("titulo", "PROCURAÇÃO AD JUDICIA ET EXTRA"),
            OUTORGANTE_INDIVIDUAL,
            OUTORGADO,
        )
        + _POA_POWERS,
        signatories=(_CLIENT_SIGNATORY,),
    ),
    DocumentType.POWER_OF_ATTORNEY_ORGANIZATION: DocumentTemplate(
        document_type=DocumentType.POWER_OF_ATTORNEY_ORGANIZATION,
        title="PROCURAÇÃO AD JUDICIA ET EXTRA",
        segments=(
            _title("titulo", "PROCURAÇÃO AD JUDICIA ET EXTRA"),
            OUTORGANTE_ORGANIZATION,
            OUTORGADO,
        )
        + _POA_POWERS,
        signatories=(_COMPANY_SIGNATORY,),
    ),
    DocumentType.INDIGENCY_DECLARATION: DocumentTemplate(
        document_type=DocumentType.INDIGENCY_DECLARATION,
        title="DECLARAÇÃO DE HIPOSSUFICIÊNCIA",
        segments=(
            _title("titulo", "DECLARAÇÃO DE HIPOSSUFICIÊNCIA"),
            _p(
                "declaracao",
                "Eu, /NOME/, /NACIONALIDADE/, /ESTADO CIVIL/, /PROFISSÃO/, portador(a) do CPF nº /CPF/, "
                "residente e domiciliado(a) em /Rua/, CEP: /CEP/, DECLARO, para os devidos fins e sob as penas "
                "da lei, que não possuo condições de arcar com as custas do processo /NUMERO DE PROCESSO/ e "
                "com os honorários advocatícios sem prejuízo do meu próprio sustento e do de minha família, "
                "razão pela qual requeiro os benefícios da gratuidade de justiça, nos termos do art. 98 e "
                "seguintes do Código de Processo Civil.",
            ),
            _p(
                "ciencia",
                "Declaro ainda estar ciente de que a falsidade da presente declaração pode implicar sanções "
                "civis, administrativas e criminais.",
            ),
            _p("local", "Firmado em /CIDADE/ - /ESTADO/, aos /DIA/ dias do mês /MÊS/ de /ANO/."),
            Segment("spacer", "espaco_assinatura", height=24.0),
        ),
        signatories=(SignatoryTemplate("DECLARANTE", "/NOME/", "CPF nº /CPF/"),),
        place_and_date="",
    ),
    DocumentType.PARTNERSHIP_AGREEMENT: DocumentTemplate(
        document_type=DocumentType.PARTNERSHIP_AGREEMENT,
        title="CONTRATO DE PARCERIA ADVOCATÍCIA",
        segments=(
            _title("titulo", "CONTRATO DE PARCERIA ADVOCATÍCIA"),
            _p("gestor", "ADVOGADO GESTOR: /NOME/.", highlighted=True),
            _p("parceiro", "ADVOGADO PARCEIRO: /PARCEIRO/, inscrito na OAB sob o nº /OAB PARCEIRO/."),
            _subtitle("titulo_objeto", "DO OBJETO"),
            _p(
                "clausula_1",
                "Cláusula 1ª. O presente contrato tem por objeto a atuação conjunta das partes na ação de "
                "/TIPO DE AÇÃO/ em favor dos seguintes clientes: /CLIENTES/.",
            ),
            _subtitle("titulo_honorarios", "DOS HONORÁRIOS"),
            _p(
                "clausula_2",
                "Cláusula 2ª. Os honorários contratuais e de sucumbência efetivamente recebidos serão "
                "partilhados entre as partes, cabendo ao ADVOGADO PARCEIRO o percentual de /PERCENTUAL/ sobre "
                "os valores líquidos recebidos, a ser repassado em até 10 (dez) dias do recebimento.",
            ),
            _subtitle("titulo_responsabilidades", "DAS RESPONSABILIDADES"),
            _p(
                "clausula_3",
                "Cláusula 3ª. Cada parte responde individualmente, perante os clientes e a Ordem dos Advogados "
                "do Brasil, pelos atos que praticar, obrigando-se ambas a observar o Código de Ética e "
                "Disciplina da OAB.",
            ),
            _p(
                "clausula_4",
                "Cláusula 4ª. O presente contrato vigorará até o encerramento definitivo da ação objeto desta "
                "parceria, podendo ser rescindido por qualquer das partes mediante notificação prévia de 30 "
                "(trinta) dias, resguardados os honorários proporcionais ao trabalho realizado.",
            ),
        ),
        signatories=(
            SignatoryTemplate("ADVOGADO GESTOR", "/NOME/"),
            SignatoryTemplate("ADVOGADO PARCEIRO", "/PARCEIRO/", "OAB nº /OAB PARCEIRO/"),
        ),
        place_and_date="/ESTADO/, /DATA/.",
    ),
}


def get_template(document_type: DocumentType) -> DocumentTemplate:
    return TEMPLATES[document_type]
