"""Sample legislative corpus used for demos, smoke tests and evaluation.

Five subject areas, each with an act effective 2024-01-01 and a 2025 act
effective 2025-09-01 that amends or supersedes it. Asking the same question
for dates on either side of 2025-09-01 must surface different answers.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from .evaluation import TemporalQueryExample

SUBJECT_KEYWORDS = {
    "transportation": ("speed", "highway"),
    "drug_policy": ("cannabis", "drug", "substance"),
    "immigration": ("immigration", "border", "visa"),
    "aviation": ("airline", "baggage", "travel"),
    "parks": ("park", "naming"),
}


@dataclass(frozen=True, slots=True)
class ActTemplate:
    """One legislative act before chunking."""

    title: str
    content: str
    document_type: str
    effective_date: date
    publication_date: date
    issuing_authority: str
    document_number: str
    key_provisions: tuple[str, ...] = ()
    expiration_date: date | None = None


def infer_subject_area(title: str) -> str:
    """Coarse topic tag derived from the act title."""
    lowered = title.lower()
    for subject, keywords in SUBJECT_KEYWORDS.items():
        if any(keyword in lowered for keyword in keywords):
            return subject
    return "general"


def document_id_for(document_number: str) -> str:
    """Stable document id, e.g. ``H.R. 2024-001`` -> ``h-r--2024-001``."""
    return document_number.replace(".", "-").replace(" ", "-").lower()


SPEED_LIMIT_ACT_2024 = """HIGHWAY SPEED LIMIT MODERNIZATION ACT OF 2024

SECTION 1. SHORT TITLE
This Act may be cited as the "Highway Speed Limit Modernization Act of 2024".

SECTION 2. FINDINGS
Congress finds that current speed limits were established during the energy crisis of the 1970s, that modern vehicles have significantly improved safety features, and that highway infrastructure has been upgraded to handle higher speeds safely.

SECTION 3. SPEED LIMIT STANDARDS
(a) RURAL INTERSTATE HIGHWAYS - The speed limit on rural interstate highways shall be 75 miles per hour, unless otherwise posted for safety reasons.
(b) URBAN HIGHWAYS - The speed limit on highways within urban areas shall be 65 miles per hour, with local authorities able to reduce it to no less than 55 mph in high-congestion areas.
(c) RESIDENTIAL AREAS - The speed limit in residential areas shall be 25 miles per hour unless otherwise posted.

SECTION 4. ENFORCEMENT
States that do not comply with these standards within 18 months shall lose 10% of federal highway funding.

SECTION 5. EFFECTIVE DATE
This Act shall take effect on January 1, 2024."""

SPEED_LIMIT_ACT_2025 = """AUTOMATED VEHICLE SPEED INTEGRATION ACT OF 2025

SECTION 1. SHORT TITLE
This Act may be cited as the "Automated Vehicle Speed Integration Act of 2025".

SECTION 2. SUPERSESSION AND AMENDMENTS
This Act supersedes the Highway Speed Limit Modernization Act of 2024 (H.R. 2024-001) and amends specific provisions thereof.

SECTION 3. AMENDMENT TO SECTION 3(a) OF THE 2024 ACT
(a) The rural interstate speed limit of 75 miles per hour established in the 2024 Act is increased to 80 miles per hour for all manually-operated vehicles.
(b) Vehicles certified as Level 4 or Level 5 autonomous may travel up to 85 miles per hour on rural interstate highways.

SECTION 4. DYNAMIC SPEED ZONES
(a) ESTABLISHMENT - Highway authorities may establish dynamic speed limit zones that adjust to real-time traffic, weather, construction activities and emergencies.
(b) SUPERSESSION OF STATIC LIMITS - In areas designated as dynamic speed zones, the static limits established in Section 3 of the 2024 Act are superseded by dynamically determined limits.

SECTION 5. ENFORCEMENT TECHNOLOGY
Automated speed enforcement systems may be deployed on highways with dynamic speed zones, and autonomous vehicles must communicate with highway infrastructure to receive real-time speed limit updates.

SECTION 6. EFFECTIVE DATE
This Act shall take effect on September 1, 2025."""

DRUG_POLICY_ACT_2024 = """CONTROLLED SUBSTANCE REFORM ACT OF 2024

SECTION 1. SHORT TITLE
This Act may be cited as the "Controlled Substance Reform Act of 2024".

SECTION 2. CANNABIS RECLASSIFICATION
(a) SCHEDULE CHANGE - Cannabis and cannabis-derived products are hereby moved from Schedule I to Schedule III of the Controlled Substances Act.
(b) MEDICAL USE AUTHORIZATION - Licensed medical practitioners may prescribe cannabis for medical conditions in all states and territories.

SECTION 3. DISTRIBUTION REQUIREMENTS
(a) FEDERAL LICENSE REQUIRED - Distribution of cannabis products requires federal licensing through the Drug Enforcement Administration.
(b) STATE COORDINATION - Federal licenses must be coordinated with state cannabis control authorities where they exist.

SECTION 4. CRIMINAL PENALTIES
(a) UNLICENSED DISTRIBUTION - Distribution without proper federal and state licensing remains a federal crime punishable by up to 5 years imprisonment.
(b) POSSESSION LIMITS - Personal possession of up to 1 ounce for medical use is permitted with a valid prescription.

SECTION 5. EFFECTIVE DATE
This Act shall take effect on January 1, 2024."""

DRUG_POLICY_ACT_2025 = """CANNABIS LEGALIZATION AND REGULATION ACT OF 2025

SECTION 1. SHORT TITLE
This Act may be cited as the "Cannabis Legalization and Regulation Act of 2025".

SECTION 2. CONTROLLED SUBSTANCES ACT AMENDMENT
Cannabis is hereby removed entirely from all schedules of the Controlled Substances Act, superseding its Schedule III classification under the Controlled Substance Reform Act of 2024 (DEA-2024-001).

SECTION 3. AMENDMENT TO SECTION 4(b) OF THE 2024 ACT
(a) Personal possession limit for adults 21 and over is increased to 2 ounces for any lawful purpose.
(b) No prescription or medical authorization is required for possession within this limit.

SECTION 4. FEDERAL TAXATION FRAMEWORK
A federal excise tax of 10% shall be imposed on retail cannabis sales, and cannabis businesses may claim standard business tax deductions.

SECTION 5. AMENDMENT TO SECTION 3(a) OF THE 2024 ACT
The federal DEA licensing requirement for distribution is replaced with a registration system administered by the Department of Agriculture.

SECTION 6. CRIMINAL JUSTICE REFORM
The Attorney General shall establish a program to expunge federal cannabis convictions for non-violent offenses.

SECTION 7. EFFECTIVE DATE
This Act shall take effect on September 1, 2025."""

IMMIGRATION_ACT_2024 = """BORDER SECURITY ENHANCEMENT ACT OF 2024

SECTION 1. SHORT TITLE
This Act may be cited as the "Border Security Enhancement Act of 2024".

SECTION 2. BIOMETRIC VERIFICATION SYSTEM
All ports of entry shall implement biometric verification systems within 12 months, collecting fingerprints, facial recognition and iris scans from all non-citizens entering the United States.

SECTION 3. VISITOR VISA EXTENSIONS
(a) EXTENDED VALIDITY - B-1/B-2 visitor visas for nationals of allied countries shall be valid for 2 years.
(b) ELIGIBLE COUNTRIES - Countries with visa overstay rates below 2% are eligible for extended validity periods.

SECTION 4. H-1B VISA PROGRAM EXPANSION
(a) CAP INCREASE - The annual H-1B visa cap is increased by 15%, from 65,000 to 74,750 visas.
(b) ADVANCED DEGREE EXEMPTION - The additional 20,000 visas for advanced degree holders remains unchanged.

SECTION 5. EFFECTIVE DATE
This Act shall take effect on January 1, 2024."""

IMMIGRATION_ACT_2025 = """COMPREHENSIVE IMMIGRATION REFORM ACT OF 2025

SECTION 1. SHORT TITLE
This Act may be cited as the "Comprehensive Immigration Reform Act of 2025".

SECTION 2. AMENDMENT TO SECTION 3 OF THE 2024 ACT
(a) B-1/B-2 visitor visas for eligible countries are extended to 5-year validity periods.
(b) The 2% overstay threshold established in the Border Security Enhancement Act of 2024 (DHS-2024-003) is reduced to 1% for 5-year visa eligibility.

SECTION 3. PATHWAY TO CITIZENSHIP
Undocumented immigrants present in the United States for 8 or more years may apply for legal status after passing background checks, paying back taxes and demonstrating English proficiency.

SECTION 4. AMENDMENT TO SECTION 4 OF THE 2024 ACT
(a) The annual H-1B visa cap is increased to 85,000 visas, superseding the 74,750 cap of the 2024 Act.
(b) The additional visas for advanced degree holders are increased from 20,000 to 30,000.

SECTION 5. GREEN CARD REFORMS
The 7% per-country limit for employment-based green cards is abolished.

SECTION 6. EFFECTIVE DATE
This Act shall take effect on September 1, 2025."""

AIRLINE_ACT_2024 = """AIRLINE CONSUMER PROTECTION ACT OF 2024

SECTION 1. SHORT TITLE
This Act may be cited as the "Airline Consumer Protection Act of 2024".

SECTION 2. CHECKED BAGGAGE REQUIREMENTS
(a) FREE CHECKED BAG - Airlines must allow one free checked bag up to 50 pounds on domestic flights exceeding 2 hours.
(b) WEIGHT LIMIT - Additional fees may only be charged for bags exceeding 50 pounds.

SECTION 3. DELAYED BAGGAGE COMPENSATION
(a) MANDATORY COMPENSATION - Airlines must pay $200 per day for baggage delayed more than 24 hours.
(b) MAXIMUM LIABILITY - Total compensation is capped at $1,500 per bag.

SECTION 4. CARRY-ON STANDARDIZATION
All airlines must accept carry-on bags measuring 22 by 14 by 9 inches, and carry-on weight limits may not exceed 40 pounds.

SECTION 5. EFFECTIVE DATE
This Act shall take effect on January 1, 2024."""

AIRLINE_ACT_2025 = """ENHANCED AIR TRAVEL STANDARDS ACT OF 2025

SECTION 1. SHORT TITLE
This Act may be cited as the "Enhanced Air Travel Standards Act of 2025".

SECTION 2. AMENDMENT TO SECTION 2(a) OF THE 2024 ACT
Section 2(a) of the Airline Consumer Protection Act of 2024 (DOT-2024-007) is hereby superseded:
(a) Free checked baggage allowance is increased to 70 pounds for all domestic flights exceeding 2 hours.
(b) Airlines may not charge additional fees for bags between 50 and 70 pounds.

SECTION 3. AMENDMENT TO SECTION 3 OF THE 2024 ACT
(a) Mandatory compensation is increased to $300 per day for baggage delayed more than 24 hours.
(b) Maximum liability is increased from $1,500 to $2,500 per bag.

SECTION 4. SMART LUGGAGE AND TRACKING
Smart luggage with removable lithium batteries is allowed as carry-on, and all airports must implement real-time baggage tracking systems.

SECTION 5. EFFECTIVE DATE
This Act shall take effect on September 1, 2025."""

PARK_ACT_2024 = """NATIONAL PARK HERITAGE PRESERVATION ACT OF 2024

SECTION 1. SHORT TITLE
This Act may be cited as the "National Park Heritage Preservation Act of 2024".

SECTION 2. NAMING REVIEW COMMITTEE
A National Park Naming Review Committee of historians, tribal representatives and park service officials is hereby established.

SECTION 3. NAME CHANGE PROCEDURES
(a) PUBLIC COMMENT - All proposed name changes require a 2-year public comment period.
(b) HISTORICAL SIGNIFICANCE - Names with significant historical importance require super-majority committee approval.

SECTION 4. DENALI NATIONAL PARK
Mount McKinley National Park is hereby officially renamed Denali National Park, recognizing the original Koyukon name for the mountain.

SECTION 5. EFFECTIVE DATE
This Act shall take effect on January 1, 2024."""

PARK_ACT_2025 = """INDIGENOUS HERITAGE RECOGNITION ACT OF 2025

SECTION 1. SHORT TITLE
This Act may be cited as the "Indigenous Heritage Recognition Act of 2025".

SECTION 2. AMENDMENT TO SECTION 3(a) OF THE 2024 ACT
(a) For changes restoring original Indigenous names, the public comment period is reduced to 6 months.
(b) The 2-year comment period of the National Park Heritage Preservation Act of 2024 (NPS-2024-001) remains in effect for all other naming changes.

SECTION 3. TRIBAL CONSULTATION REQUIREMENTS
All park naming decisions must include consultation with affected tribal nations, who have 6 months to provide input.

SECTION 4. INDIGENOUS NAMES COUNCIL
An Indigenous Names Council operates alongside the Naming Review Committee and may veto naming decisions that conflict with Indigenous heritage.

SECTION 5. EFFECTIVE DATE
This Act shall take effect on September 1, 2025."""

_FIRST_WAVE = date(2024, 1, 1)
_SECOND_WAVE = date(2025, 9, 1)

SAMPLE_ACTS: tuple[ActTemplate, ...] = (
    ActTemplate(
        title="Highway Speed Limit Modernization Act of 2024",
        content=SPEED_LIMIT_ACT_2024,
        document_type="Federal Legislation",
        effective_date=_FIRST_WAVE,
        publication_date=date(2023, 12, 15),
        issuing_authority="United States Congress",
        document_number="H.R. 2024-001",
        key_provisions=("75 mph rural interstate", "65 mph urban highway", "25 mph residential"),
    ),
    ActTemplate(
        title="Automated Vehicle Speed Integration Act of 2025",
        content=SPEED_LIMIT_ACT_2025,
        document_type="Federal Legislation",
        effective_date=_SECOND_WAVE,
        publication_date=date(2025, 8, 15),
        issuing_authority="United States Congress",
        document_number="H.R. 2025-042",
        key_provisions=("85 mph autonomous vehicles", "dynamic speed zones", "supersedes 2024 Act"),
    ),
    ActTemplate(
        title="Controlled Substance Reform Act of 2024",
        content=DRUG_POLICY_ACT_2024,
        document_type="Federal Legislation",
        effective_date=_FIRST_WAVE,
        publication_date=date(2023, 12, 20),
        issuing_authority="Drug Enforcement Administration",
        document_number="DEA-2024-001",
        key_provisions=("Schedule III marijuana", "medical use allowed", "federal licensing required"),
    ),
    ActTemplate(
        title="Cannabis Legalization and Regulation Act of 2025",
        content=DRUG_POLICY_ACT_2025,
        document_type="Federal Legislation",
        effective_date=_SECOND_WAVE,
        publication_date=date(2025, 8, 10),
        issuing_authority="United States Congress",
        document_number="H.R. 2025-089",
        key_provisions=("full legalization", "federal taxation", "expungement program"),
    ),
    ActTemplate(
        title="Border Security Enhancement Act of 2024",
        content=IMMIGRATION_ACT_2024,
        document_type="Federal Legislation",
        effective_date=_FIRST_WAVE,
        publication_date=date(2023, 12, 22),
        issuing_authority="Department of Homeland Security",
        document_number="DHS-2024-003",
        key_provisions=("biometric verification", "2-year visitor visas", "15% H-1B increase"),
    ),
    ActTemplate(
        title="Comprehensive Immigration Reform Act of 2025",
        content=IMMIGRATION_ACT_2025,
        document_type="Federal Legislation",
        effective_date=_SECOND_WAVE,
        publication_date=date(2025, 8, 12),
        issuing_authority="United States Congress",
        document_number="H.R. 2025-156",
        key_provisions=("citizenship pathway", "green card reform", "85,000 H-1B cap"),
    ),
    ActTemplate(
        title="Airline Consumer Protection Act of 2024",
        content=AIRLINE_ACT_2024,
        document_type="Federal Regulation",
        effective_date=_FIRST_WAVE,
        publication_date=date(2023, 12, 28),
        issuing_authority="Department of Transportation",
        document_number="DOT-2024-007",
        key_provisions=("free 50lb bag", "$200 delay compensation", "standardized carry-on"),
    ),
    ActTemplate(
        title="Enhanced Air Travel Standards Act of 2025",
        content=AIRLINE_ACT_2025,
        document_type="Federal Regulation",
        effective_date=_SECOND_WAVE,
        publication_date=date(2025, 8, 18),
        issuing_authority="Federal Aviation Administration",
        document_number="FAA-2025-023",
        key_provisions=("70lb free bags", "smart luggage allowed", "real-time tracking"),
    ),
    ActTemplate(
        title="National Park Heritage Preservation Act of 2024",
        content=PARK_ACT_2024,
        document_type="Federal Legislation",
        effective_date=_FIRST_WAVE,
        publication_date=date(2023, 12, 30),
        issuing_authority="National Park Service",
        document_number="NPS-2024-001",
        key_provisions=("naming committee", "2-year comment period", "Denali official name"),
    ),
    ActTemplate(
        title="Indigenous Heritage Recognition Act of 2025",
        content=PARK_ACT_2025,
        document_type="Federal Legislation",
        effective_date=_SECOND_WAVE,
        publication_date=date(2025, 8, 25),
        issuing_authority="National Park Service",
        document_number="NPS-2025-012",
        key_provisions=("tribal consultation required", "Indigenous Names Council", "6-month comment period"),
    ),
)

_BEFORE = date(2025, 6, 1)
_AFTER = date(2025, 9, 10)

SAMPLE_QUERIES: tuple[TemporalQueryExample, ...] = (
    TemporalQueryExample(
        query_id="Q-SPEED-BEFORE",
        question="What is the speed limit on rural interstate highways?",
        context_date=_BEFORE,
        expected_document_ids=(document_id_for("H.R. 2024-001"),),
        disallowed_document_ids=(document_id_for("H.R. 2025-042"),),
    ),
    TemporalQueryExample(
        query_id="Q-SPEED-AFTER",
        question="What is the speed limit on rural interstate highways?",
        context_date=_AFTER,
        expected_document_ids=(document_id_for("H.R. 2025-042"),),
    ),
    TemporalQueryExample(
        query_id="Q-CANNABIS-BEFORE",
        question="How much cannabis may an adult possess?",
        context_date=_BEFORE,
        expected_document_ids=(document_id_for("DEA-2024-001"),),
        disallowed_document_ids=(document_id_for("H.R. 2025-089"),),
    ),
    TemporalQueryExample(
        query_id="Q-CANNABIS-AFTER",
        question="How much cannabis may an adult possess?",
        context_date=_AFTER,
        expected_document_ids=(document_id_for("H.R. 2025-089"),),
    ),
    TemporalQueryExample(
        query_id="Q-H1B-BEFORE",
        question="What is the annual H-1B visa cap?",
        context_date=_BEFORE,
        expected_document_ids=(document_id_for("DHS-2024-003"),),
        disallowed_document_ids=(document_id_for("H.R. 2025-156"),),
    ),
    TemporalQueryExample(
        query_id="Q-BAGGAGE-AFTER",
        question="How heavy can my free checked bag be on a domestic flight?",
        context_date=_AFTER,
        expected_document_ids=(document_id_for("FAA-2025-023"),),
    ),
    TemporalQueryExample(
        query_id="Q-PARKS-BEFORE",
        question="How long is the public comment period for renaming a national park?",
        context_date=_BEFORE,
        expected_document_ids=(document_id_for("NPS-2024-001"),),
        disallowed_document_ids=(document_id_for("NPS-2025-012"),),
    ),
)
