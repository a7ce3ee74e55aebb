"""Custom exception classes for the brand bible generator."""


class BrandBibleError(Exception):
    """Base exception for all generator errors."""
    pass


class ConfigurationError(BrandBibleError):
    """Configuration or initialization errors."""
    pass


class APIError(BrandBibleError):
    """Base class for API-related errors."""
    pass


class ProviderError(APIError):
    """Generic provider API error with status code."""
    
    def __init__(self, provider: str, message: str, status_code: int = None):
        self.provider = provider
        self.status_code = status_code
        super().__init__(f"{provider} error: {message}")


class AuthenticationError(ProviderError):
    """API authentication failed."""
    
    def __init__(self, provider: str):
        super().__init__(provider, "Authentication failed", 401)


class RateLimitError(ProviderError):
    """API rate limit exceeded."""
    
    def __init__(self, provider: str, retry_after: int = None):
        self.retry_after = retry_after
        message = "Rate limit exceeded"
        if retry_after:
            message += f", retry after {retry_after}s"
        super().__init__(provider, message, 429)


class GatewayError(BrandBibleError):
    """Errors raised by the AI service gateway."""
    pass


class MalformedResponse(GatewayError):
    """Structured output could not be parsed or failed structural checks."""
    pass


class GenerationFailure(GatewayError):
    """Image or text generation returned nothing usable."""
    pass


class ValidationError(BrandBibleError):
    """User input rejected before any network call."""
    pass


class CriticalGenerationFailure(BrandBibleError):
    """The brand bible stage failed and the run was aborted."""
    pass


class PartialGenerationFailure(BrandBibleError):
    """A non-critical stage failed in whole or in part."""
    pass


class ChatTurnFailure(BrandBibleError):
    """A chat turn could not be completed."""
    pass
