import pytest

from billforge.config import get_settings


SAMPLE_BILLING_YAML = """\
business:
  name: Example Consulting LLC
  person: Jane Doe
  address: 1 Main Street, Springfield
  image_file: logo.png
bill:
  department: Engineering
  currency: USD
  payment_terms: Net 30
  due_date: "{{endOfNextMonth}}"
  date: ignored
bill_to:
  email: ap@client.example
  name: Client Corp
  street: 99 Market Street
  city_state_zip: Metropolis, NY 10001
  country: USA
billables:
  - quantity: 10
    description: "Consulting services {{ billingPeriod }}"
    unit_price: 150.5
    currency: USD
  - quantity: 1.5
    description: Support
    unit_price: 1000
    currency: USD
tax:
  default_percentage: 8.25
  tax_name: Sales Tax
bank:
  transfer_type: ACH
  name: Example Consulting LLC
  account_type: Checking
  routing_number: "021000021"
  account_number: "000123456789"
colors:
  color_light: {r: 240, g: 240, b: 255}
  color_dark: {r: 20, g: 30, b: 90}
"""


@pytest.fixture
def sample_yaml() -> str:
    return SAMPLE_BILLING_YAML


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
