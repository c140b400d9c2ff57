"""
Learning module catalog

Single source for per-module XP, premium gating and titles. Matches the
values shipped in the frontend learning data.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional


@dataclass(frozen=True)
class ModuleInfo:
    xp: int
    premium_required: bool
    title: str


MODULE_CATALOG: Mapping[str, ModuleInfo] = MappingProxyType(
    {
        # Beginner path
        "phishing-basics": ModuleInfo(10, False, "Phishing Awareness 101"),
        "password-security": ModuleInfo(12, False, "Password Security Essentials"),
        "job-scam": ModuleInfo(15, False, "Job Scam Detection"),
        "social-media-safety": ModuleInfo(12, False, "Social Media Security Essentials"),
        "online-shopping-security": ModuleInfo(10, False, "Online Shopping & Payment Security"),
        # Intermediate & expert paths
        "social-engineering": ModuleInfo(25, True, "Social Engineering Tactics"),
        "identity-theft": ModuleInfo(20, True, "Identity Theft Prevention"),
        "advanced-phishing": ModuleInfo(25, True, "Advanced Phishing Detection"),
        "financial-fraud": ModuleInfo(30, True, "Financial Fraud & Investment Scams"),
        "mobile-security": ModuleInfo(20, True, "Mobile Device Security"),
        "corporate-security": ModuleInfo(35, True, "Corporate Security Best Practices"),
        "incident-response": ModuleInfo(40, True, "Incident Response & Recovery"),
    }
)


def get_module(module_id: str, catalog: Mapping[str, ModuleInfo] = MODULE_CATALOG) -> Optional[ModuleInfo]:
    return catalog.get(module_id)


def catalog_counts(catalog: Mapping[str, ModuleInfo] = MODULE_CATALOG) -> dict:
    """Total, free and premium module counts"""
    premium = sum(1 for info in catalog.values() if info.premium_required)
    return {"total": len(catalog), "free": len(catalog) - premium, "premium": premium}
