from pydantic import BaseModel, ConfigDict
from enum import StrEnum


class Repository(BaseModel):
    id: int
    full_name: str
    url: str | None = None


class Installation(BaseModel):
    id: int


class App(BaseModel):
    id: int


class CheckSuite(BaseModel):
    id: int
    head_sha: str
    app: App | None = None


class CheckRun(BaseModel):
    id: int
    head_sha: str
    app: App


class RequestedAction(BaseModel):
    identifier: str


class CheckSuiteEvent(BaseModel):
    action: str
    repository: Repository
    check_suite: CheckSuite
    installation: Installation


class CheckRunEvent(BaseModel):
    action: str
    repository: Repository
    check_run: CheckRun
    installation: Installation
    requested_action: RequestedAction | None = None


class CheckRunStatus(StrEnum):
    queued = "queued"
    in_progress = "in_progress"
    completed = "completed"


class CheckRunConclusion(StrEnum):
    success = "success"
    failure = "failure"


class ActionIdentifier(StrEnum):
    is_sig_change = "is_sig_change"
    not_sig_change = "not_sig_change"


class CheckRunOutput(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    summary: str
    text: str | None = None


class CheckRunAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    description: str
    identifier: ActionIdentifier


class CheckRunCreate(BaseModel):
    name: str
    head_sha: str


class CheckRunUpdate(BaseModel):
    status: CheckRunStatus
    conclusion: CheckRunConclusion | None = None
    output: CheckRunOutput | None = None
    actions: list[CheckRunAction] | None = None
