"""Shared test fixtures."""

from collections.abc import Callable
from pathlib import Path

import pytest

from quarry.settings import get_settings

ORDER_CONTRACT = """\
/**
 * Order Data Contract
 * Order data structure for e-commerce
 */
export const OrderSchema = {
  "type": "object",
  "properties": {
    "id": { "type": "string" },
    "amount": { "type": "number" }
  },
  "required": ["id", "amount"]
} as const;

export type Order = {
  id: string;
  amount: number;
};
"""

USER_TYPES = """\
/**
 * A registered user
 */
export interface User {
  id: string;
  email: string;
  name?: string;
}

export interface Product {
  id: string;
  name: string;
  price: number;
}
"""

USERS_ROUTE = """\
import { NextRequest, NextResponse } from 'next/server';

/**
 * Get all users
 */
export async function GET(request: NextRequest) {
  return NextResponse.json({ users: [] });
}

/**
 * Create a new user
 */
export async function POST(request: NextRequest) {
  return NextResponse.json({ message: 'User created' });
}
"""

STRIPE_CONNECTOR = """\
const STRIPE_API_URL = 'https://api.stripe.com/v1';

export class StripeConnector {
  private baseURL = STRIPE_API_URL;

  async getCustomers() {
    // Implementation
  }
}
"""

EVALUATOR_METRICS = """\
export const reconciliationRate = 0.95;
export const processingTime = 2.5;
export const errorCount = 0;

export function trackConversion(event: string) {
  analytics.track('conversion', { event });
}
"""

BUTTON_COMPONENT = """\
import { analytics } from '@/lib/analytics';

export function Button() {
  const handleClick = () => {
    analytics.track('button_clicked');
    gtag('event', 'button_interaction');
  };

  return <button onClick={handleClick}>Click me</button>;
}
"""

PACKAGE_JSON = """\
{
  "name": "shop",
  "dependencies": {
    "@supabase/supabase-js": "^2.45.0",
    "resend": "^4.0.0",
    "stripe": "^14.0.0"
  },
  "devDependencies": {
    "@types/node": "^20.0.0"
  }
}
"""


@pytest.fixture(autouse=True)
def fresh_settings():
    """Clear cached settings so each test sees its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def write_files(tmp_path) -> Callable[[dict[str, str]], Path]:
    """Write a {relative path: content} mapping under tmp_path and return the root."""

    def _write(files: dict[str, str]) -> Path:
        for relative, content in files.items():
            path = tmp_path / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return tmp_path

    return _write


@pytest.fixture
def sample_project(write_files) -> Path:
    """A small project with one artifact of every kind."""
    return write_files({
        "package.json": PACKAGE_JSON,
        "contracts/order.ts": ORDER_CONTRACT,
        "types/index.ts": USER_TYPES,
        "app/api/users/route.ts": USERS_ROUTE,
        "app/api/users/[id]/route.ts": "export async function DELETE() {}\n",
        "connectors/stripe.ts": STRIPE_CONNECTOR,
        "lib/supabase.ts": "export const supabase = createClient(url, key);\n",
        "evaluators/metrics.ts": EVALUATOR_METRICS,
        "components/Button.tsx": BUTTON_COMPONENT,
    })


@pytest.fixture
def order_contract() -> str:
    """Return a contract module with a documented schema literal."""
    return ORDER_CONTRACT


@pytest.fixture
def user_types() -> str:
    """Return a type module with two interfaces."""
    return USER_TYPES


@pytest.fixture
def users_route() -> str:
    """Return a route module exporting GET and POST handlers."""
    return USERS_ROUTE


@pytest.fixture
def stripe_connector() -> str:
    """Return a connector module configuring the Stripe base URL."""
    return STRIPE_CONNECTOR


@pytest.fixture
def evaluator_metrics() -> str:
    """Return an evaluator module declaring named metrics."""
    return EVALUATOR_METRICS


@pytest.fixture
def button_component() -> str:
    """Return a component firing two tracking events."""
    return BUTTON_COMPONENT
