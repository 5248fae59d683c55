"""
Placeholder substitution for clause templates.

Templates mark fields with slash-delimited tokens such as /NOME/ or
/VALOR TOTAL/. TOKEN_TABLE maps each token to a pure resolver over a
PartyView; missing values resolve to PLACEHOLDER. Substitution is a single
regex pass, so a substituted value is never scanned again for tokens and the
order of TOKEN_TABLE cannot change the output.
"""
from __future__ import annotations

import html
import re
from functools import lru_cache
from typing import Callable, Iterable, Mapping, Optional

from models import PartyView
from reporting.format_utils import (
    PLACEHOLDER,
    date_parts,
    format_currency,
    format_date,
    or_placeholder,
)

Resolver = Callable[[PartyView], str]

_TOKEN_LIKE = re.compile(r"/[A-ZÀ-Ý][A-ZÀ-Ý ]{1,40}/")


def _first(*values: str) -> str:
    for value in values:
        if value and str(value).strip():
            return str(value).strip()
    return PLACEHOLDER


def _date_part(index: int) -> Resolver:
    def resolve(view: PartyView) -> str:
        parts = date_parts(view.contract_date)
        return parts[index] if parts else PLACEHOLDER

    return resolve


def _percentage(view: PartyView) -> str:
    text = view.percentage.strip().rstrip("%").strip()
    return f"{text}%" if text else PLACEHOLDER


def _clients(view: PartyView) -> str:
    if not view.clients:
        return PLACEHOLDER
    return "; ".join(
        f"{or_placeholder(name)}, CPF nº {or_placeholder(cpf)}" for name, cpf in view.clients
    )


TOKEN_TABLE: tuple[tuple[str, Resolver], ...] = (
    ("/NOME/", lambda v: _first(v.name, v.representative_name)),
    ("/ESTADO CIVIL/", lambda v: _first(v.marital_status, v.representative_marital_status)),
    ("/PROFISSÃO/", lambda v: _first(v.profession, v.representative_profession)),
    ("/NACIONALIDADE/", lambda v: _first(v.nationality, v.representative_nationality)),
    ("/CPF/", lambda v: _first(v.tax_id, v.representative_tax_id)),
    ("/Rua/", lambda v: _first(v.street, v.representative_street)),
    ("/COMPLEMENTO/", lambda v: _first(v.complement)),
    ("/BAIRRO/", lambda v: _first(v.district)),
    ("/CEP/", lambda v: _first(v.postal_code, v.representative_postal_code)),
    ("/CIDADE/", lambda v: _first(v.city, v.representative_city)),
    ("/ESTADO/", lambda v: _first(v.state, v.representative_state)),
    ("/RAZÃO SOCIAL/", lambda v: _first(v.corporate_name)),
    ("/CNPJ/", lambda v: _first(v.cnpj)),
    ("/REPRESENTANTE/", lambda v: _first(v.representative_name)),
    ("/CPF REPRESENTANTE/", lambda v: _first(v.representative_tax_id)),
    ("/NUMERO DE PROCESSO/", lambda v: _first(v.process_number)),
    ("/VALOR TOTAL/", lambda v: format_currency(v.total_value)),
    ("/ENTRADA/", lambda v: format_currency(v.down_payment)),
    ("/DATA DE ENTRADA/", lambda v: format_date(v.down_payment_date)),
    ("/VEZES DE PARCELAS/", lambda v: _first(v.installment_count)),
    ("/VALOR DA PARCELA/", lambda v: format_currency(v.installment_amount)),
    ("/DATA DE PAGAMENTO DAS PARCELAS/", lambda v: _first(v.installment_due_day)),
    ("/FORMA DE PAGAMENTO/", lambda v: _first(v.payment_method)),
    ("/PARCEIRO/", lambda v: _first(v.partner_name)),
    ("/OAB PARCEIRO/", lambda v: _first(v.partner_bar_id)),
    ("/TIPO DE AÇÃO/", lambda v: _first(v.action_type)),
    ("/PERCENTUAL/", _percentage),
    ("/CLIENTES/", _clients),
    ("/DATA/", lambda v: format_date(v.contract_date)),
    ("/DIA/", _date_part(0)),
    ("/MÊS/", _date_part(1)),
    ("/ANO/", _date_part(2)),
)

TOKEN_VOCABULARY = frozenset(token for token, _ in TOKEN_TABLE)
_RESOLVERS: dict[str, Resolver] = dict(TOKEN_TABLE)


@lru_cache(maxsize=32)
def _token_pattern(tokens: tuple[str, ...]) -> re.Pattern[str]:
    # Longest first so overlapping alternatives never shadow each other.
    ordered = sorted(tokens, key=lambda t: (-len(t), t))
    return re.compile("|".join(re.escape(t) for t in ordered))


_BASE_PATTERN = _token_pattern(tuple(TOKEN_VOCABULARY))


def emphasize(value: str) -> str:
    return f'<span class="token-value">{html.escape(value, quote=True)}</span>'


def _view_of(record) -> PartyView:
    return record if isinstance(record, PartyView) else record.party_view()


def resolve_tokens(record) -> dict[str, str]:
    """Plain (unwrapped) value for every token in the vocabulary."""
    view = _view_of(record)
    return {token: resolver(view) for token, resolver in TOKEN_TABLE}


def _substitute(
    template: str,
    record,
    extra_values: Optional[Mapping[str, str]],
    wrap: Callable[[str], str],
) -> str:
    if not template:
        return ""
    view = _view_of(record)
    extras = dict(extra_values or {})
    pattern = _BASE_PATTERN if not extras else _token_pattern(tuple(sorted(TOKEN_VOCABULARY | set(extras))))
    resolved: dict[str, str] = {}

    def replace(match: re.Match[str]) -> str:
        token = match.group(0)
        if token not in resolved:
            if token in extras:
                value = or_placeholder(extras[token])
            else:
                value = _RESOLVERS[token](view)
            resolved[token] = wrap(value)
        return resolved[token]

    return pattern.sub(replace, template)


def substitute(
    template: str,
    record,
    *,
    extra_values: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Replace every recognized token in `template` with its emphasized value.

    `extra_values` adds document-level tokens (the firm's details) to this
    pass only. Unknown tokens are left as they are.
    """
    return _substitute(template, record, extra_values, emphasize)


def render_plain(
    template: str,
    record,
    *,
    extra_values: Optional[Mapping[str, str]] = None,
) -> str:
    """Same pass as substitute() with raw values and no markup."""
    return _substitute(template, record, extra_values, lambda value: value)


def find_unknown_tokens(template: str, known: Iterable[str] = ()) -> list[str]:
    """Token-like markers that nothing resolves, in order of first appearance."""
    allowed = TOKEN_VOCABULARY | set(known)
    seen: list[str] = []
    for match in _TOKEN_LIKE.finditer(template or ""):
        token = match.group(0)
        if token not in allowed and token not in seen:
            seen.append(token)
    return seen
