"""
Tax Computation Statement Generator

Turns a computed ``TaxResult`` into line-by-line entry guidance for each form
the taxpayer files: Form 1040, Schedule 1, Schedule 1-A, Schedule A,
Schedule E Part II, Form 8962 and Colorado DR 0104. The statement is plain
data; rendering is left to the caller (``to_text`` and ``to_json`` cover the
simple cases).

Lines that do not apply are kept with ``skip=True`` so the guidance can say
"leave blank" rather than silently omitting a line.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from taxguide.calculator.decimal_math import format_line_amount, format_money, format_percentage, money, to_money
from taxguide.models.taxpayer import FilingStatus

if TYPE_CHECKING:
    from taxguide.models.tax_result import TaxResult
    from taxguide.models.tax_return import TaxReturnInputs


def format_amount(amount: Optional[float]) -> str:
    """
    Format an amount for a form line; negatives in parentheses.

    Examples:
        >>> format_amount(84250)
        '84,250.00'
        >>> format_amount(-3000)
        '(3,000.00)'
    """
    if amount is None:
        return ""
    if money(amount) < 0:
        return f"({format_line_amount(-amount)})"
    return format_line_amount(amount)


@dataclass
class ComputationLine:
    """A single line in the computation statement."""
    form: str
    line_number: str
    description: str
    amount: Optional[float] = None
    text_value: Optional[str] = None  # non-numeric entries such as a name or a checkbox
    note: Optional[str] = None
    skip: bool = False
    is_total: bool = False

    @property
    def display_value(self) -> str:
        if self.skip:
            return "0 / blank"
        if self.text_value is not None:
            return self.text_value
        return format_amount(self.amount)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "form": self.form,
            "line_number": self.line_number,
            "description": self.description,
            "amount": self.amount,
            "text_value": self.text_value,
            "display_value": self.display_value,
            "note": self.note,
            "skip": self.skip,
            "is_total": self.is_total,
        }


@dataclass
class ComputationSection:
    """A section of the computation statement (one form or schedule)."""
    form: str
    title: str
    lines: List[ComputationLine] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)

    def add(
        self,
        line_number: str,
        description: str,
        amount: Optional[float] = None,
        note: Optional[str] = None,
        *,
        text_value: Optional[str] = None,
        is_total: bool = False,
    ) -> ComputationLine:
        line = ComputationLine(
            form=self.form,
            line_number=line_number,
            description=description,
            amount=to_money(amount) if amount is not None else None,
            text_value=text_value,
            note=note,
            is_total=is_total,
        )
        self.lines.append(line)
        return line

    def skip(self, line_number: str, description: str) -> ComputationLine:
        line = ComputationLine(
            form=self.form,
            line_number=line_number,
            description=description,
            amount=0.0,
            skip=True,
        )
        self.lines.append(line)
        return line

    def add_if(
        self,
        condition: bool,
        line_number: str,
        description: str,
        amount: float,
        note: Optional[str] = None,
        skip_reason: str = "none",
    ) -> ComputationLine:
        """Add the line when ``condition`` holds, otherwise a skipped line."""
        if condition:
            return self.add(line_number, description, amount, note)
        return self.skip(line_number, f"{description} ({skip_reason})")


class ComputationStatement:
    """
    Line-by-line form guidance for a computed return.

    Args:
        result: Output of ``compute``
        inputs: The inputs the result was computed from; only needed for
            informational entries (S corporation name and EIN)
    """

    def __init__(self, result: "TaxResult", inputs: Optional["TaxReturnInputs"] = None):
        self.result = result
        self.inputs = inputs
        self.sections: List[ComputationSection] = []

    @property
    def filing_status_label(self) -> str:
        return FilingStatus(self.result.filing_status).display_name

    def generate(self) -> Dict[str, Any]:
        """
        Generate the complete statement.

        Returns dictionary with a summary and every applicable form section.
        """
        r = self.result
        sections = [self._build_form_1040(), self._build_schedule_1()]
        if r.adjustments.schedule_1a_total > 0:
            sections.append(self._build_schedule_1a())
        if r.deductions.uses_itemized:
            sections.append(self._build_schedule_a())
        if r.income.entity is not None:
            sections.append(self._build_schedule_e())
        if r.credits.subsidy is not None:
            sections.append(self._build_form_8962())
        if r.state is not None:
            sections.append(self._build_dr_0104())
        self.sections = sections

        return {
            "tax_year": r.tax_year,
            "filing_status": self.filing_status_label,
            "summary": self._build_summary(),
            "sections": [self._section_to_dict(s) for s in sections],
        }

    def _build_summary(self) -> Dict[str, Any]:
        r = self.result
        summary = {
            "federal": {
                "agi": r.agi,
                "taxable_income": r.taxable_income,
                "total_tax": r.total_tax,
                "total_payments": r.payments.total,
                "refund": r.refund,
                "amount_owed": r.amount_owed,
                "effective_tax_rate": format_percentage(r.effective_tax_rate),
                "marginal_rate": format_percentage(r.marginal_rate, 0),
            },
        }
        if r.state is not None:
            summary["state"] = {
                "state_code": r.state.state_code,
                "taxable_income": r.state.taxable_income,
                "tax": r.state.tax,
                "total_payments": r.state.total_payments,
                "refund": r.state.refund,
                "amount_owed": r.state.amount_owed,
            }
        return summary

    def _build_form_1040(self) -> ComputationSection:
        r = self.result
        inc = r.income
        section = ComputationSection(form="Form 1040", title="Form 1040 - U.S. Individual Income Tax Return")

        section.add("Top", "Filing status box to check", text_value=self.filing_status_label)

        # Income
        section.add("1a", "Wages, salaries, tips (W-2 box 1)", inc.wages)
        section.add_if(inc.taxable_interest > 0, "2b", "Taxable interest", inc.taxable_interest)
        section.add_if(
            inc.qualified_dividends > 0, "3a", "Qualified dividends", inc.qualified_dividends,
            note="Subset of line 3b; taxed at capital gain rates",
        )
        section.add_if(inc.ordinary_dividends > 0, "3b", "Ordinary dividends", inc.ordinary_dividends)
        cap_note = "Attach Schedule D"
        if inc.capital_loss_carryover > 0:
            cap_note = (
                f"Loss limited to {format_amount(-r.income.capital_gain_for_return)}; "
                f"carry {format_amount(inc.capital_loss_carryover)} forward to 2026"
            )
        section.add_if(
            inc.capital_gain_for_return != 0, "7", "Capital gain or (loss)",
            inc.capital_gain_for_return, note=cap_note,
        )
        section.add_if(
            inc.additional_income != 0, "8", "Additional income from Schedule 1, line 10",
            inc.additional_income,
        )
        section.add("9", "Total income", inc.total_income, is_total=True)

        # Adjusted gross income
        adj = r.adjustments
        adj_note = None
        if adj.schedule_1a_total > 0:
            adj_note = (
                f"Schedule 1 Part II {format_amount(adj.schedule_1_part2_total)} plus "
                f"Schedule 1-A {format_amount(adj.schedule_1a_total)}"
            )
        section.add_if(adj.total > 0, "10", "Adjustments to income", adj.total, note=adj_note)
        section.add("11", "Adjusted gross income", r.agi, is_total=True)

        # Tax and credits
        ded = r.deductions
        if ded.uses_itemized:
            section.add("12", "Itemized deductions (Schedule A)", ded.deduction_amount)
        else:
            section.add(
                "12", "Standard deduction", ded.deduction_amount,
                note=f"Standard deduction for {self.filing_status_label}",
            )
        section.add("15", "Taxable income", r.taxable_income, is_total=True)
        worksheet = "D" if r.filing_status == FilingStatus.HEAD_OF_HOUSEHOLD.value else "A"
        tax_note = f"Tax Computation Worksheet, section {worksheet}"
        if r.preferential_income > 0:
            tax_note = "Qualified Dividends and Capital Gain Tax Worksheet"
        section.add("16", "Tax", r.base_tax, note=tax_note)
        section.add_if(
            r.credits.excess_advance_repayment > 0, "17",
            "Excess advance premium tax credit repayment (Schedule 2)",
            r.credits.excess_advance_repayment,
        )
        line_18 = r.base_tax + r.credits.excess_advance_repayment
        section.add("18", "Add lines 16 and 17", line_18)
        section.add_if(
            r.credits.dependent_care_credit > 0, "19", "Child and dependent care credit (Form 2441)",
            r.credits.dependent_care_credit,
            note=f"{format_percentage(r.credits.dependent_care_rate, 0)} of qualifying expenses",
        )
        section.add_if(
            r.credits.education_credit > 0, "20", "Education credits (Form 8863)", r.credits.education_credit,
        )
        line_21 = r.credits.dependent_care_credit + r.credits.education_credit
        section.add_if(line_21 > 0, "21", "Add lines 19 and 20", line_21)
        section.add("22", "Subtract line 21 from line 18", max(0.0, line_18 - line_21))

        # Credits beyond line 18 also offset the net investment income tax.
        offset = min(r.niit, max(0.0, line_21 - line_18))
        other_taxes = r.niit + r.additional_medicare_tax - offset
        other_note = None
        if offset > 0:
            other_note = f"Net of {format_amount(offset)} in credits not used on line 22"
        section.add_if(
            other_taxes > 0, "23", "Other taxes (Schedule 2: Form 8960 and Form 8959)", other_taxes,
            note=other_note,
        )
        section.add("24", "Add lines 22 and 23; total tax", r.total_tax, is_total=True)

        # Payments
        pay = r.payments
        section.add("25a", "Federal income tax withheld (W-2 box 2)", pay.federal_withholding)
        section.add_if(pay.estimated_payments > 0, "26", "Estimated tax payments", pay.estimated_payments)
        section.add_if(
            r.credits.premium_tax_credit > 0, "31", "Net premium tax credit (Schedule 3)",
            r.credits.premium_tax_credit,
        )
        section.add_if(
            pay.excess_social_security > 0, "31", "Excess Social Security tax withheld (Schedule 3)",
            pay.excess_social_security,
        )
        section.add("33", "Total payments", pay.total, is_total=True)

        # Refund or amount owed
        section.add_if(r.refund > 0, "34", "Amount overpaid (refund)", r.refund, skip_reason="no overpayment")
        section.add_if(r.amount_owed > 0, "37", "Amount you owe", r.amount_owed, skip_reason="nothing owed")
        return section

    def _build_schedule_1(self) -> ComputationSection:
        r = self.result
        inc = r.income
        adj = r.adjustments
        section = ComputationSection(form="Schedule 1", title="Schedule 1 - Additional Income and Adjustments")

        section.add_if(inc.taxable_state_refund > 0, "1", "Taxable state tax refund", inc.taxable_state_refund)
        section.add_if(
            inc.entity_income != 0, "5", "S corporation income (loss) from Schedule E", inc.entity_income,
        )
        section.add_if(
            inc.unemployment_compensation > 0, "7", "Unemployment compensation", inc.unemployment_compensation,
        )
        section.add_if(inc.other_income > 0, "8z", "Other income", inc.other_income)
        section.add("10", "Total additional income", inc.additional_income, is_total=True)

        section.add_if(adj.hsa_deduction > 0, "13", "HSA deduction (Form 8889)", adj.hsa_deduction)
        ira_note = None
        if adj.ira_contribution > adj.ira_deduction:
            ira_note = f"{format_amount(adj.ira_contribution)} contributed; remainder is nondeductible (Form 8606)"
        section.add_if(
            adj.ira_deduction > 0, "20", "IRA deduction", adj.ira_deduction,
            note=ira_note, skip_reason="none or income too high",
        )
        section.add_if(
            adj.student_loan_interest > 0, "21", "Student loan interest deduction", adj.student_loan_interest,
            skip_reason="none or phased out",
        )
        section.add("26", "Total adjustments", adj.schedule_1_part2_total, is_total=True)
        return section

    def _build_schedule_1a(self) -> ComputationSection:
        adj = self.result.adjustments
        section = ComputationSection(form="Schedule 1-A", title="Schedule 1-A - Additional Deductions")

        section.add_if(adj.tips_deduction > 0, "Part II", "Qualified tips deduction", adj.tips_deduction,
                       skip_reason="not applicable")
        section.add_if(adj.overtime_deduction > 0, "Part III", "Qualified overtime deduction",
                       adj.overtime_deduction, skip_reason="not applicable")
        section.add_if(adj.vehicle_loan_interest_deduction > 0, "Part IV",
                       "Qualified passenger vehicle loan interest deduction",
                       adj.vehicle_loan_interest_deduction, skip_reason="not applicable")
        section.add_if(adj.senior_deduction > 0, "Part V", "Enhanced deduction for seniors",
                       adj.senior_deduction, skip_reason="not applicable")
        section.add("Total", "Total Schedule 1-A deductions", adj.schedule_1a_total, is_total=True)
        return section

    def _build_schedule_a(self) -> ComputationSection:
        ded = self.result.deductions
        section = ComputationSection(form="Schedule A", title="Schedule A - Itemized Deductions")

        section.add("1", "Medical and dental expenses", ded.medical_expenses)
        section.add("3", "AGI multiplied by 7.5%", ded.medical_floor)
        section.add("4", "Deductible medical expenses", ded.medical_deduction)
        salt_note = None
        if ded.salt_paid > ded.salt_deduction:
            salt_note = f"Capped; {format_amount(ded.salt_paid)} paid"
        section.add("5e", "State and local taxes", ded.salt_deduction, note=salt_note)
        section.add("11", "Gifts by cash or check", ded.charitable_cash)
        section.add_if(
            ded.charitable_noncash > 0, "12", "Other than by cash or check", ded.charitable_noncash,
            note="Attach Form 8283 if over $500",
        )
        section.add("17", "Total itemized deductions", ded.itemized_total, is_total=True)
        return section

    def _build_schedule_e(self) -> ComputationSection:
        entity = self.result.income.entity
        section = ComputationSection(form="Schedule E", title="Schedule E, Part II - S Corporation Income")

        source = self.inputs.income.entity_return if self.inputs is not None else None
        if source is not None:
            section.add("28a", "Name of S corporation", text_value=source.name or "S corporation")
            section.add("28d", "Employer identification number", text_value=source.ein or "")
            section.add(
                "28f", "Materially participated",
                text_value="Yes" if source.materially_participates else "No",
            )
        section.add("-", "Ordinary business income (Form 1120-S line 21)", entity.ordinary_income)
        section.add(
            "-", "Ownership percentage",
            text_value=format_percentage(entity.ownership_percent / 100),
        )
        if entity.allocated_income >= 0:
            section.add("28k", "Nonpassive income from Schedule K-1 box 1", entity.allocated_income)
        else:
            section.add(
                "28i", "Nonpassive loss from Schedule K-1 box 1", -entity.allocated_income,
                note="Deductible only up to your stock and debt basis",
            )
        section.add("41", "Total income or (loss)", entity.allocated_income, is_total=True)
        return section

    def _build_form_8962(self) -> ComputationSection:
        s = self.result.credits.subsidy
        section = ComputationSection(form="Form 8962", title="Form 8962 - Premium Tax Credit")

        section.add("1", "Tax family size", text_value=str(s.family_size))
        section.add("3", "Household income", self.result.agi)
        section.add("4", "Federal poverty line", s.poverty_line)
        section.add("5", "Household income as a percentage of federal poverty line",
                    text_value=f"{s.poverty_line_percent:.2f}%")
        section.add("7", "Applicable figure", text_value=f"{s.applicable_contribution_percent:.4f}")
        section.add("8a", "Annual contribution for health care", s.annual_contribution)
        section.add("11", "Maximum premium assistance", s.max_credit)
        section.add("24", "Total premium tax credit", s.allowed_credit)
        section.add("25", "Advance payment of premium tax credit", s.advance_paid)
        if s.net_credit >= 0:
            section.add("26", "Net premium tax credit", s.credit, note="Schedule 3, line 9", is_total=True)
        else:
            section.add(
                "29", "Excess advance premium tax credit repayment", s.repayment,
                note="Schedule 2, line 1a", is_total=True,
            )
        return section

    def _build_dr_0104(self) -> ComputationSection:
        st = self.result.state
        section = ComputationSection(
            form="DR 0104",
            title=f"{st.state_name} DR 0104 - Individual Income Tax Return",
        )
        state_inputs = self.inputs.state if self.inputs is not None else None

        section.add("1", "Federal taxable income (Form 1040, line 15)", st.federal_taxable_income)
        section.add_if(st.additions > 0, "2", "Additions (DR 0104AD)", st.additions)
        if state_inputs is not None:
            section.add_if(
                state_inputs.us_government_interest_subtraction > 0, "AD 5",
                "U.S. government interest", state_inputs.us_government_interest_subtraction,
            )
            section.add_if(
                state_inputs.pension_subtraction > 0, "AD", "Pension and annuity subtraction",
                state_inputs.pension_subtraction,
            )
            section.add_if(
                state_inputs.other_subtractions > 0, "AD", "Other subtractions", state_inputs.other_subtractions,
            )
        section.add_if(st.subtractions > 0, "4", "Subtractions (DR 0104AD)", st.subtractions)
        section.add("5", f"{st.state_name} taxable income", st.taxable_income, is_total=True)
        section.add("6", f"{st.state_name} tax", st.tax, note=f"{format_percentage(st.rate, 1)} flat rate")

        section.add("Payments", "State income tax withheld (W-2 box 17)", st.withholding)
        section.add_if(st.estimated_payments > 0, "Payments", "Estimated tax payments", st.estimated_payments)
        section.add_if(st.credits > 0, "Credits", "Other state credits (DR 0104CR)", st.credits)
        section.add("Total", "Total payments and credits", st.total_payments, is_total=True)

        if st.refund > 0:
            section.add("Refund", "Overpayment (refund)", st.refund)
        else:
            section.add("Owed", "Amount owed", st.amount_owed)
        return section

    def _section_to_dict(self, section: ComputationSection) -> Dict[str, Any]:
        """Convert section to dictionary."""
        return {
            "form": section.form,
            "title": section.title,
            "lines": [line.to_dict() for line in section.lines],
            "notes": section.notes,
        }

    def to_text(self) -> str:
        """Generate plain text computation statement."""
        data = self.generate()
        title = f"Tax Year {data['tax_year']} Computation Statement"
        subtitle = f"Filing Status: {data['filing_status']}"
        lines = ["=" * 80, f"{title:^80}", f"{subtitle:^80}", "=" * 80]
        for section in data["sections"]:
            lines.append("-" * 80)
            lines.append(section["title"])
            lines.append("-" * 80)
            for line in section["lines"]:
                label = f"{line['line_number']:<10} {line['description']}"
                if line["skip"]:
                    lines.append(f"  {label:<60} {'blank':>15}")
                    continue
                lines.append(f"  {label:<60} {line['display_value']:>15}")
                if line["note"]:
                    lines.append(f"  {'':<10} [{line['note']}]")
            lines.append("")
        lines.append("=" * 80)
        lines.extend(self._balance_lines())
        return "\n".join(lines)

    def _balance_lines(self) -> List[str]:
        """Closing refund or amount owed for each return."""
        r = self.result
        returns = [("Federal", r)]
        if r.state is not None:
            returns.append((r.state.state_name, r.state))
        lines = []
        for name, outcome in returns:
            if outcome.is_refund:
                label, amount = f"{name} refund", outcome.refund
            else:
                label, amount = f"{name} amount owed", outcome.amount_owed
            lines.append(f"  {label:<60} {format_money(amount):>15}")
        return lines

    def to_json(self) -> str:
        """Generate JSON computation statement."""
        return json.dumps(self.generate(), indent=2, default=str)
