"""
Run the sample $2M deal through the pro forma and print the results.

Usage:
    python scripts/run_sample_proforma.py [output.csv]
"""
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from propfolio.calculations.assumptions import sample_assumptions
from propfolio.calculations.metrics import calculate_investment_metrics
from propfolio.calculations.proforma import calculate_proforma
from propfolio.services.export import proforma_to_csv


def format_rate(rate):
    return "N/A" if rate is None else f"{rate:.2%}"


def main():
    assumptions = sample_assumptions()
    results = calculate_proforma(assumptions)

    print(f"Purchase price:   ${assumptions.purchase_price:,.0f}")
    print(f"Loan amount:      ${results.loan_amount:,.0f}")
    print(f"Equity invested:  ${results.total_equity_invested:,.0f}")
    print()
    print(f"{'Year':>4} {'NOI':>12} {'Debt Svc':>12} {'BTCF':>12} {'ATCF':>12} {'Balance':>14}")
    for cf in results.annual_cashflows:
        print(
            f"{cf.year:>4} {cf.noi:>12,.0f} {cf.debt_service:>12,.0f} "
            f"{cf.before_tax_cashflow:>12,.0f} {cf.after_tax_cashflow:>12,.0f} "
            f"{cf.loan_balance:>14,.0f}"
        )

    sale = results.sale_proceeds
    print()
    print(f"Sale price:       ${sale.sale_price:,.0f}")
    print(f"After-tax sale:   ${sale.after_tax_sale_proceeds:,.0f}")
    print(f"Net profit:       ${results.net_profit:,.0f}")
    print(f"IRR:              {format_rate(results.irr)}")
    print(f"Equity multiple:  {results.equity_multiple:.2f}x")

    metrics = calculate_investment_metrics(assumptions, results)
    print(f"Unlevered IRR:    {format_rate(metrics['unlevered_irr'])}")

    if len(sys.argv) > 1:
        with open(sys.argv[1], "w") as f:
            f.write(proforma_to_csv(results))
        print(f"\nWrote {sys.argv[1]}")


if __name__ == "__main__":
    main()
