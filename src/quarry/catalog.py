"""Known services and the conventional file layout each pass scans."""

from collections.abc import Mapping
from types import MappingProxyType

# Manifest dependency name -> service name
DEPENDENCY_SERVICES: Mapping[str, str] = MappingProxyType({
    "@supabase/supabase-js": "Supabase",
    "@supabase/ssr": "Supabase",
    "resend": "Resend",
    "typesense": "Typesense",
    "stripe": "Stripe",
    "@hubspot/api-client": "HubSpot",
    "salesforce": "Salesforce",
    "@clerk/nextjs": "Clerk",
    "next-auth": "NextAuth",
    "@auth0/nextjs-auth0": "Auth0",
})

# URL fragment -> API name, checked in order
URL_SERVICES: tuple[tuple[str, str], ...] = (
    ("supabase", "Supabase API"),
    ("stripe", "Stripe API"),
    ("resend", "Resend API"),
    ("typesense", "Typesense API"),
    ("hubspot", "HubSpot API"),
    ("salesforce", "Salesforce API"),
    ("github", "GitHub API"),
)

CONTRACT_PATTERNS = ("contracts/**/*.{ts,js,json}",)
TYPE_PATTERNS = ("{lib/types,types,src/types}/**/*.{ts,js}",)
ROUTE_PATTERNS = ("{app,src/app}/api/**/route.{ts,js}",)
SOURCE_PATTERNS = ("{lib,src,connectors}/**/*.{ts,js}",)
METRIC_PATTERNS = ("{evaluators,analytics,metrics,lib/analytics}/**/*.{ts,js}",)
TRACKING_PATTERNS = ("{app,components,lib}/**/*.{ts,tsx,js,jsx}",)

HTTP_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH")

INTERNAL_API_NAME = "Internal API"
INTERNAL_API_ROOT = "app/api"
