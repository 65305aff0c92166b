from .registration_pipeline import (
    GoBack,
    PipelineState,
    RegistrationPersisted,
    Stage,
    SubmissionPipeline,
    SubmitEnterprise,
    SubmitIdentity,
    reduce,
)

__all__ = [
    "GoBack",
    "PipelineState",
    "RegistrationPersisted",
    "Stage",
    "SubmissionPipeline",
    "SubmitEnterprise",
    "SubmitIdentity",
    "reduce",
]
