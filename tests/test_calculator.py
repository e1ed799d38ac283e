"""
API tests for the loan calculator.
The preview must agree with the schedule a stored loan of the same terms produces.
"""
import pytest


def test_quote_quarterly_payment(client):
    response = client.post("/calculator/quote", json={"amount": 500000, "term_months": 12})

    assert response.status_code == 200
    data = response.json()
    assert data["annual_rate_percent"] == 15.0
    assert data["payment_plan"] == "installment"
    assert data["periods"] == 4
    assert data["period_payment"] == pytest.approx(136934.37, abs=0.01)
    assert data["total_payment"] == pytest.approx(547737.50, abs=0.01)
    assert data["total_interest"] == pytest.approx(47737.50, abs=0.01)
    assert len(data["schedule"]) == 4
    assert data["schedule"][-1]["balance"] == 0.0


@pytest.mark.parametrize("term, periods", [(6, 2), (18, 6), (36, 12), (60, 20)])
def test_quote_period_count(client, term, periods):
    response = client.post("/calculator/quote", json={"amount": 1000000, "term_months": term})

    assert response.status_code == 200
    assert response.json()["periods"] == periods


def test_quote_lump_sum(client):
    response = client.post(
        "/calculator/quote",
        json={"amount": 500000, "term_months": 24, "payment_plan": "full"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["periods"] == 1
    assert data["total_interest"] == pytest.approx(150000.0)
    assert data["total_payment"] == pytest.approx(650000.0)
    assert data["period_payment"] == data["total_payment"]


def test_quote_totals_are_sums_of_the_schedule(client):
    data = client.post("/calculator/quote", json={"amount": 2500000, "term_months": 48}).json()

    assert data["total_payment"] == pytest.approx(sum(e["payment"] for e in data["schedule"]), abs=0.05)
    assert data["total_interest"] == pytest.approx(sum(e["interest"] for e in data["schedule"]), abs=0.05)


@pytest.mark.parametrize("payload", [
    {"amount": 10000, "term_months": 12},
    {"amount": 6000000, "term_months": 12},
    {"amount": 500000, "term_months": 7},
    {"amount": 500000, "term_months": 72},
    {"amount": 500000, "term_months": 0},
    {"amount": 500000, "term_months": 12, "payment_plan": "weekly"},
])
def test_quote_validation(client, payload):
    response = client.post("/calculator/quote", json=payload)

    assert response.status_code == 422


def test_quote_matches_stored_loan_schedule(client, submit_application):
    """A 12 month quote and a salary loan (12 month term) share formula and rounding."""
    quote = client.post("/calculator/quote", json={"amount": 750000, "term_months": 12}).json()
    application = submit_application(loan_type="salary", loan_amount=750000)
    schedule = client.get(f"/applications/{application['id']}/schedule").json()

    assert schedule["summary"]["total_payment"] == quote["total_payment"]
    assert schedule["summary"]["total_interest"] == quote["total_interest"]
    assert application["repayment"]["total_payment"] == quote["total_payment"]
    assert [e["payment"] for e in schedule["schedule"]] == [e["payment"] for e in quote["schedule"]]


def test_response_carries_correlation_id(client):
    response = client.post(
        "/calculator/quote",
        json={"amount": 500000, "term_months": 12},
        headers={"X-Correlation-ID": "corr-quote-1"}
    )

    assert response.headers["X-Correlation-ID"] == "corr-quote-1"
