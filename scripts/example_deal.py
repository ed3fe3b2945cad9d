from dealcheck.domain.deal import DealInput
from dealcheck.services.deal_analyzer import analyze_deal


def main() -> None:
    deal = DealInput.create(
        sale_price=375000,
        downpayment_percentage=20,
        annual_mortgage_interest_rate=5.15,
        mortgage_amortization_years=25,
        monthly_hoa_dues=0,
        expected_vacancy_weeks=3,
        monthly_rent=2950,
    )

    res = analyze_deal(deal, adjust=True)

    print(res["markdown"])

    print("--- As-is @ sale price ---")
    as_is = analyze_deal(deal, adjust=False)
    print("ROI:", f"{as_is['metrics']['annual_roi']:.2f}%")
    print("Cashflow:", f"{as_is['metrics']['annual_cashflow']:,.2f}")
    print("Meets criteria:", as_is["meets_criteria"])


if __name__ == "__main__":
    main()
