from .gateway import AbilityGateway, AbilityResult, AuditSink

__all__ = ["AbilityGateway", "AbilityResult", "AuditSink"]
