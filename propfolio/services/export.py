"""
CSV export of pro forma results.

One row per cash flow line, one column per year, followed by a summary
block of investment-level figures.
"""

from typing import List, Tuple

import pandas as pd

from propfolio.calculations.proforma import ProFormaResults

CASHFLOW_ROWS: List[Tuple[str, str]] = [
    ("effective_gross_income", "Effective Gross Income"),
    ("operating_expenses", "Operating Expenses"),
    ("noi", "Net Operating Income"),
    ("debt_service", "Debt Service"),
    ("interest_expense", "Interest Expense"),
    ("principal_payment", "Principal Payment"),
    ("before_tax_cashflow", "Before-Tax Cash Flow"),
    ("depreciation", "Depreciation"),
    ("taxable_income", "Taxable Income"),
    ("taxes", "Taxes"),
    ("after_tax_cashflow", "After-Tax Cash Flow"),
    ("loan_balance", "Loan Balance"),
    ("cash_on_cash_return", "Cash-on-Cash Return"),
    ("after_tax_cash_on_cash_return", "After-Tax Cash-on-Cash Return"),
]

SUMMARY_ROWS: List[Tuple[str, str]] = [
    ("total_equity_invested", "Total Equity Invested"),
    ("loan_amount", "Loan Amount"),
    ("total_cash_returned", "Total Cash Returned"),
    ("net_profit", "Net Profit"),
    ("irr", "IRR"),
    ("equity_multiple", "Equity Multiple"),
    ("average_cash_on_cash", "Average Cash-on-Cash"),
    ("total_tax_savings", "Total Tax Savings"),
]

SALE_ROWS: List[Tuple[str, str]] = [
    ("sale_price", "Sale Price"),
    ("selling_costs", "Selling Costs"),
    ("loan_balance", "Loan Payoff"),
    ("taxes_on_sale", "Taxes on Sale"),
    ("after_tax_sale_proceeds", "After-Tax Sale Proceeds"),
]


def cashflows_to_frame(results: ProFormaResults) -> pd.DataFrame:
    """Annual cash flows as a DataFrame: labeled rows, 'Year N' columns."""
    labels = [label for _, label in CASHFLOW_ROWS]

    if not results.annual_cashflows:
        return pd.DataFrame(index=pd.Index(labels, name="Line Item"))

    data = {
        f"Year {cf.year}": [round(getattr(cf, name), 2) for name, _ in CASHFLOW_ROWS]
        for cf in results.annual_cashflows
    }
    return pd.DataFrame(data, index=pd.Index(labels, name="Line Item"))


def summary_to_frame(results: ProFormaResults) -> pd.DataFrame:
    """Investment summary and sale figures as Metric/Value rows."""
    rows = []
    for name, label in SUMMARY_ROWS:
        value = getattr(results, name)
        # An unsolvable IRR exports as N/A
        rows.append((label, "N/A" if value is None else round(value, 6 if name == "irr" else 2)))

    for name, label in SALE_ROWS:
        rows.append((label, round(getattr(results.sale_proceeds, name), 2)))

    return pd.DataFrame(rows, columns=["Metric", "Value"])


def proforma_to_csv(results: ProFormaResults) -> str:
    """Serialize results to CSV text: cash flow table, blank line, summary."""
    cashflows_csv = cashflows_to_frame(results).to_csv()
    summary_csv = summary_to_frame(results).to_csv(index=False)
    return f"{cashflows_csv}\n{summary_csv}"
