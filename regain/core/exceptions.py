class DomainError(Exception):
    def __init__(self, code: str, message: str, details: dict | None = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class NotFoundError(DomainError):
    def __init__(self, entity: str, message: str | None = None, details: dict | None = None):
        code = f"NF_{entity.upper()}_001"
        msg = message or f"{entity} not found"
        super().__init__(code, msg, details)


class ValidationError(DomainError):
    def __init__(self, field: str, message: str, details: dict | None = None):
        code = f"VAL_{field.upper()}_001"
        msg = f"Validation failed for {field}: {message}"
        super().__init__(code, msg, details or {"field": field})


class GenerationError(DomainError):
    """Base for every way a weekly generation run can fail."""


class LoadFailure(GenerationError):
    def __init__(self, message: str, code: str = "GEN_LOAD_001", details: dict | None = None):
        super().__init__(code, message, details)


class SchemaViolation(GenerationError):
    def __init__(self, node: str, message: str, details: dict | None = None):
        code = "GEN_SCHEMA_001"
        msg = f"{node} returned invalid output: {message}"
        super().__init__(code, msg, {"node": node, **(details or {})})
        self.node = node


class LLMCallError(GenerationError):
    def __init__(self, node: str, message: str, details: dict | None = None):
        code = "GEN_LLM_001"
        msg = f"{node} LLM call failed: {message}"
        super().__init__(code, msg, {"node": node, **(details or {})})
        self.node = node


class EmptyCandidateSet(GenerationError):
    def __init__(self, phase: str, message: str | None = None, code: str = "GEN_EMPTY_001", details: dict | None = None):
        msg = message or f"No candidate variations left for the {phase} phase"
        super().__init__(code, msg, {"phase": phase, **(details or {})})
        self.phase = phase


class InsufficientCandidates(EmptyCandidateSet):
    def __init__(self, phase: str, available: int, required: int):
        super().__init__(
            phase,
            f"Only {available} candidate variations left for the {phase} phase, {required} required",
            code="GEN_EMPTY_002",
            details={"available": available, "required": required},
        )


class PersistenceFailure(GenerationError):
    def __init__(self, message: str, code: str = "GEN_PERSIST_001", details: dict | None = None):
        super().__init__(code, message, details)
