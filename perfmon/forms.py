# perfmon/forms.py
"""
Form Schemas and Submission Flow

Every create/edit form on the entity screens is validated against one of
the pydantic models below before any query is issued:

- validate_form(): raw widget values -> (model, {}) or (None, field errors)
- submit_form(): validate, then run exactly one mutation callable

Tagged variants:
- TargetRef: who a KPI target belongs to (user / team / division)
- DailyReport: per-division daily report payload, stored in
  performance_logs.meta for metric 'daily_report'
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import date as date_type
from typing import Annotated, Any, Callable, Dict, Literal, Optional, Tuple, Type, Union

from pydantic import (
    BaseModel, ConfigDict, Field, TypeAdapter, ValidationError,
    field_validator, AnyUrl,
)

logger = logging.getLogger(__name__)

Role = Literal['manager', 'karyawan', 'pkl']
Division = Literal['konten_kreator', 'host_live', 'model', 'manager']
Platform = Literal['tiktok', 'shopee', 'other']
AccountType = Literal['affiliate', 'seller']
AccountStatus = Literal['active', 'banned', 'pelanggaran', 'not_recommended']
KpiPeriod = Literal['daily', 'monthly']

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_URL_ADAPTER = TypeAdapter(AnyUrl)


def _check_url(value: str) -> str:
    try:
        _URL_ADAPTER.validate_python(value)
    except ValidationError:
        raise ValueError("Invalid URL")
    return value


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class FormSchema(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra='ignore')


# =============================================================================
# ACCOUNTS
# =============================================================================

class AccountCreate(FormSchema):
    username: str = Field(min_length=2)
    platform: Platform = 'tiktok'
    account_type: AccountType = 'affiliate'
    followers: int = Field(default=0, ge=0)
    keranjang_kuning: bool = False

    @field_validator('followers', mode='before')
    @classmethod
    def missing_followers_to_zero(cls, value):
        return 0 if _blank_to_none(value) is None else value


class AccountUpdate(AccountCreate):
    status: AccountStatus = 'active'


# =============================================================================
# EMPLOYEES / SIGN-UP
# =============================================================================

class SignUpForm(FormSchema):
    full_name: str = Field(min_length=2)
    username: str = Field(min_length=3)
    email: str
    password: str = Field(min_length=6)

    @field_validator('email')
    @classmethod
    def check_email(cls, value: str) -> str:
        if not _EMAIL_RE.match(value):
            raise ValueError("Invalid email address")
        return value.lower()


class EmployeeCreate(SignUpForm):
    role: Role = 'karyawan'
    division: Optional[Division] = 'konten_kreator'

    @field_validator('division', mode='before')
    @classmethod
    def blank_to_none(cls, value):
        return _blank_to_none(value)


# =============================================================================
# KPI TARGETS
# =============================================================================

class UserTarget(BaseModel):
    kind: Literal['user'] = 'user'
    user_id: str = Field(min_length=1)

    def as_columns(self) -> Tuple[str, str]:
        return 'user', self.user_id


class TeamTarget(BaseModel):
    kind: Literal['team'] = 'team'
    team_id: str = Field(min_length=1)

    def as_columns(self) -> Tuple[str, str]:
        return 'team', self.team_id


class DivisionTarget(BaseModel):
    kind: Literal['division'] = 'division'
    division: Division

    def as_columns(self) -> Tuple[str, str]:
        return 'division', self.division


TargetRef = Annotated[
    Union[UserTarget, TeamTarget, DivisionTarget],
    Field(discriminator='kind'),
]

_TARGET_ID_FIELDS = {'user': 'user_id', 'team': 'team_id', 'division': 'division'}


def target_payload(target_for_type: str, target_for_id: Optional[str]) -> Dict[str, Any]:
    """Widget values (type + selected id) -> TargetRef input"""
    id_field = _TARGET_ID_FIELDS.get(target_for_type, 'user_id')
    return {'kind': target_for_type, id_field: target_for_id or ''}


class KpiTargetCreate(FormSchema):
    target: TargetRef
    metric: str = Field(min_length=3)
    target_value: float = Field(ge=1)
    period: KpiPeriod = 'monthly'


# =============================================================================
# CONTENT (tutorials / SOPs / tools / products)
# =============================================================================

class TutorialCreate(FormSchema):
    title: str = Field(min_length=5)
    body: Optional[str] = None
    youtube_url: Optional[str] = None
    file_path: Optional[str] = None
    is_public: bool = False

    @field_validator('body', 'youtube_url', 'file_path', mode='before')
    @classmethod
    def blank_to_none(cls, value):
        return _blank_to_none(value)

    @field_validator('youtube_url', 'file_path')
    @classmethod
    def check_url(cls, value: Optional[str]) -> Optional[str]:
        return _check_url(value) if value is not None else None


class SopCreate(FormSchema):
    title: str = Field(min_length=5)
    description: Optional[str] = None
    file_path: str = Field(min_length=1)

    @field_validator('description', mode='before')
    @classmethod
    def blank_to_none(cls, value):
        return _blank_to_none(value)

    @field_validator('file_path')
    @classmethod
    def check_url(cls, value: str) -> str:
        return _check_url(value)


class ToolCreate(FormSchema):
    title: str = Field(min_length=3)
    description: Optional[str] = None
    url: str

    @field_validator('description', mode='before')
    @classmethod
    def blank_to_none(cls, value):
        return _blank_to_none(value)

    @field_validator('url')
    @classmethod
    def check_url(cls, value: str) -> str:
        return _check_url(value)


class ProductCreate(FormSchema):
    title: str = Field(min_length=5)
    description: Optional[str] = None
    spreadsheet_url: str

    @field_validator('description', mode='before')
    @classmethod
    def blank_to_none(cls, value):
        return _blank_to_none(value)

    @field_validator('spreadsheet_url')
    @classmethod
    def check_url(cls, value: str) -> str:
        return _check_url(value)


# =============================================================================
# DAILY REPORTS
# =============================================================================

class _ReportBase(FormSchema):
    notes: Optional[str] = None

    @field_validator('notes', mode='before')
    @classmethod
    def blank_to_none(cls, value):
        return _blank_to_none(value)

    def numeric_metrics(self) -> Dict[str, float]:
        """Numeric payload fields, each treated as a metric on the dashboard"""
        return {}

    def to_meta(self) -> Dict[str, Any]:
        return self.model_dump(exclude={'division'}, exclude_none=True)


class CreatorReport(_ReportBase):
    division: Literal['konten_kreator'] = 'konten_kreator'
    video_count: int = Field(ge=0)
    post_count: int = Field(ge=0)

    def numeric_metrics(self) -> Dict[str, float]:
        return {'video_count': float(self.video_count), 'post_count': float(self.post_count)}


class HostLiveReport(_ReportBase):
    division: Literal['host_live'] = 'host_live'
    live_duration_hours: float = Field(ge=0)
    total_sales: float = Field(ge=0)

    def numeric_metrics(self) -> Dict[str, float]:
        return {
            'live_duration_hours': float(self.live_duration_hours),
            'total_sales': float(self.total_sales),
        }


class ModelReport(_ReportBase):
    division: Literal['model'] = 'model'
    project_name: str = Field(min_length=3)


class ManagerReport(_ReportBase):
    division: Literal['manager'] = 'manager'


DailyReport = Annotated[
    Union[CreatorReport, HostLiveReport, ModelReport, ManagerReport],
    Field(discriminator='division'),
]

DAILY_REPORT_ADAPTER = TypeAdapter(DailyReport)

# Fields each division fills in, in display order
DAILY_REPORT_FIELDS = {
    'konten_kreator': ['video_count', 'post_count'],
    'host_live': ['live_duration_hours', 'total_sales'],
    'model': ['project_name'],
    'manager': [],
}


def parse_report_meta(division: Optional[str], meta: Dict[str, Any]):
    """Decode a stored daily_report payload; None when it does not fit its division"""
    if not division:
        return None
    try:
        return DAILY_REPORT_ADAPTER.validate_python({**(meta or {}), 'division': division})
    except ValidationError as e:
        logger.warning(f"Unreadable daily report payload for division {division}: {e.error_count()} errors")
        return None


# =============================================================================
# PERFORMANCE LOGS
# =============================================================================

class PerformanceLogCreate(FormSchema):
    date: date_type
    user_id: str = Field(min_length=1)
    metric: str = Field(min_length=3)
    value: float = Field(ge=0)
    notes: Optional[str] = None

    @field_validator('notes', mode='before')
    @classmethod
    def blank_to_none(cls, value):
        return _blank_to_none(value)


# =============================================================================
# VALIDATION & SUBMISSION
# =============================================================================

@dataclass
class FormResult:
    """Outcome of a form submission"""
    success: bool
    message: str = ""
    errors: Dict[str, str] = field(default_factory=dict)
    data: Optional[BaseModel] = None

    @property
    def is_validation_error(self) -> bool:
        return bool(self.errors)


def collect_errors(exc: ValidationError) -> Dict[str, str]:
    """Flatten pydantic errors into {field: first message}"""
    errors: Dict[str, str] = {}
    for err in exc.errors():
        names = [str(part) for part in err.get('loc', ()) if isinstance(part, str)]
        field_name = names[-1] if names else 'form'
        message = err.get('msg', 'Invalid value')
        if message.startswith('Value error, '):
            message = message[len('Value error, '):]
        errors.setdefault(field_name, message)
    return errors


def validate_form(schema: Union[Type[BaseModel], TypeAdapter], raw: Dict[str, Any]):
    """
    Validate raw widget values.

    Returns:
        Tuple of (validated model or None, {field: message})
    """
    try:
        if isinstance(schema, TypeAdapter):
            return schema.validate_python(raw), {}
        return schema.model_validate(raw), {}
    except ValidationError as e:
        return None, collect_errors(e)


def submit_form(
    schema: Union[Type[BaseModel], TypeAdapter],
    raw: Dict[str, Any],
    mutate: Callable[[Any], Tuple[bool, str]],
) -> FormResult:
    """
    Validate then run exactly one mutation.

    The mutation is never called when validation fails.
    """
    data, errors = validate_form(schema, raw)
    if errors:
        return FormResult(False, "Please fix the fields below", errors)

    success, message = mutate(data)
    return FormResult(success, message, {}, data)


__all__ = [
    'AccountCreate', 'AccountUpdate',
    'SignUpForm', 'EmployeeCreate',
    'UserTarget', 'TeamTarget', 'DivisionTarget', 'TargetRef',
    'target_payload', 'KpiTargetCreate',
    'TutorialCreate', 'SopCreate', 'ToolCreate', 'ProductCreate',
    'CreatorReport', 'HostLiveReport', 'ModelReport', 'ManagerReport',
    'DailyReport', 'DAILY_REPORT_ADAPTER', 'DAILY_REPORT_FIELDS', 'parse_report_meta',
    'PerformanceLogCreate',
    'FormResult', 'collect_errors', 'validate_form', 'submit_form',
]
