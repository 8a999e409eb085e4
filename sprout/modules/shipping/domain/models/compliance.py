# 📄 File: sprout/modules/shipping/domain/models/compliance.py
#
# 🧭 Purpose (Layman Explanation):
# The rule book for sending plants across borders: which countries we know about, and
# for each route and plant, which certificates and permits are needed before shipping.
#
# 🧪 Purpose (Technical Summary):
# Static country list and compliance rule table, with the lookup that prefers a rule
# naming the species exactly and falls back to a route-wide "ALL" rule.
#
# 🔗 Dependencies:
# - pydantic
#
# 🔄 Connected Modules / Calls From:
# - ShippingService
# - shipping API schemas

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

ALL_SPECIES = "ALL"


class Country(BaseModel):
    name: str
    code: str = Field(..., min_length=2, max_length=2, description="ISO 3166-1 alpha-2")

    model_config = ConfigDict(frozen=True)


COUNTRY_LIST: List[Country] = [
    Country(name="United States", code="US"),
    Country(name="Canada", code="CA"),
    Country(name="United Kingdom", code="GB"),
    Country(name="Germany", code="DE"),
    Country(name="France", code="FR"),
    Country(name="Australia", code="AU"),
    Country(name="Japan", code="JP"),
]

COUNTRY_CODES = frozenset(c.code for c in COUNTRY_LIST)


class CitesAppendix(str, Enum):
    I = "I"
    II = "II"
    III = "III"


class PhytosanitaryInfo(BaseModel):
    nppo_name: str
    application_link: str
    notes: str


class CitesInfo(BaseModel):
    appendix: CitesAppendix
    export_authority_link: str
    import_authority_link: str
    notes: str

    model_config = ConfigDict(use_enum_values=True)


class ImportPermitInfo(BaseModel):
    agency_name: str
    application_link: str
    notes: str


class CustomsInfo(BaseModel):
    notes: str


class Prohibition(BaseModel):
    is_prohibited: bool
    reason: str


class ComplianceRule(BaseModel):
    """Paperwork needed to ship the listed species along one route."""

    from_country: str
    to_country: str
    plant_species: List[str]
    pc_required: bool
    cites_required: bool
    ip_required: bool
    pc_info: PhytosanitaryInfo
    cites_info: CitesInfo
    ip_info: ImportPermitInfo
    customs_info: CustomsInfo
    prohibitions: Optional[Prohibition] = None

    model_config = ConfigDict(frozen=True)

    def matches_route(self, from_country: str, to_country: str) -> bool:
        return self.from_country == from_country and self.to_country == to_country


COMPLIANCE_RULES: List[ComplianceRule] = [
    ComplianceRule(
        from_country="US",
        to_country="CA",
        plant_species=["Monstera deliciosa", "Ficus lyrata"],
        pc_required=True,
        cites_required=False,
        ip_required=False,
        pc_info=PhytosanitaryInfo(
            nppo_name="USDA APHIS (Animal and Plant Health Inspection Service)",
            application_link="https://www.aphis.usda.gov/aphis/ourfocus/planthealth/sa_export/sa_ephyto",
            notes=(
                "Phytosanitary certificates are generally required for all live plants entering "
                "Canada from the US. Apply online via the ePhyto system."
            ),
        ),
        cites_info=CitesInfo(
            appendix=CitesAppendix.II,
            export_authority_link="",
            import_authority_link="",
            notes="Not applicable for Monstera deliciosa.",
        ),
        ip_info=ImportPermitInfo(
            agency_name="",
            application_link="",
            notes=(
                "Import Permit generally not required for personal shipments of common "
                "houseplants from the US."
            ),
        ),
        customs_info=CustomsInfo(
            notes=(
                "A standard customs declaration (e.g., CN22/CN23) is required. Clearly state the "
                "scientific name and value of the plant."
            ),
        ),
    ),
    ComplianceRule(
        from_country="US",
        to_country="CA",
        plant_species=["ALL_CITES_APPENDIX_I"],
        pc_required=True,
        cites_required=True,
        ip_required=True,
        pc_info=PhytosanitaryInfo(
            nppo_name="USDA APHIS",
            application_link="https://www.aphis.usda.gov/aphis/ourfocus/planthealth/sa_export/sa_ephyto",
            notes="A Phytosanitary Certificate is mandatory.",
        ),
        cites_info=CitesInfo(
            appendix=CitesAppendix.I,
            export_authority_link="https://www.fws.gov/service/permits/apply-cites-permit",
            import_authority_link=(
                "https://www.canada.ca/en/environment-climate-change/services/"
                "convention-international-trade-endangered-species/permits.html"
            ),
            notes=(
                "CITES Appendix I plants require BOTH an export permit from the US Fish and "
                "Wildlife Service and an import permit from the Canadian CITES Management "
                "Authority BEFORE shipping. This process is lengthy and strict."
            ),
        ),
        ip_info=ImportPermitInfo(
            agency_name="Canadian Food Inspection Agency (CFIA)",
            application_link=(
                "https://inspection.canada.ca/plant-health/importing-plants/eng/1300938482077/1300938555021"
            ),
            notes="An Import Permit is required for most CITES-listed species, in addition to CITES permits.",
        ),
        customs_info=CustomsInfo(
            notes=(
                "Customs declaration must include copies of all permits (PC, CITES Export, CITES "
                "Import). Failure to declare properly can result in seizure and fines."
            ),
        ),
    ),
]


def get_compliance_requirements(
    from_country: str,
    to_country: str,
    species: str,
    rules: Optional[List[ComplianceRule]] = None,
) -> Optional[ComplianceRule]:
    """
    Find the rule for shipping `species` from one country to another.

    A rule naming the species exactly wins over a route-wide "ALL" rule.
    Country codes must already be normalised to upper case.
    """
    table = COMPLIANCE_RULES if rules is None else rules
    route_rules = [r for r in table if r.matches_route(from_country, to_country)]

    for rule in route_rules:
        if species in rule.plant_species:
            return rule

    for rule in route_rules:
        if ALL_SPECIES in rule.plant_species:
            return rule

    return None
