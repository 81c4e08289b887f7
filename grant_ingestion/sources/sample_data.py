"""Verification grants injected when a full pass yields nothing.

Offline or sandboxed runs reach no source at all; these records keep the
downstream store populated with representative data. Deadlines are relative
to the run so the records are live when written.
"""

from datetime import datetime, timedelta
from typing import List, Optional

from ..models import SAMPLE_TAG, CandidateRecord, utc_now


def generate_sample_grants(now: Optional[datetime] = None) -> List[CandidateRecord]:
    now = now or utc_now()
    in_two_months = now + timedelta(days=60)
    in_four_months = now + timedelta(days=120)

    return [
        CandidateRecord(
            title="AWS Cloud Credits for Research",
            description=(
                "Amazon Web Services provides cloud credits for research projects. "
                "Apply for up to $10,000 in AWS credits for your research project."
            ),
            organization="Amazon Web Services",
            categories=["Cloud Compute"],
            amount="$10,000 in credits",
            deadline=in_two_months,
            url="https://aws.amazon.com/grants/",
            source="aws_credits",
            location="Global",
            tags=["AWS", "Cloud", "Research", SAMPLE_TAG],
        ),
        CandidateRecord(
            title="Google Cloud Research Credits",
            description=(
                "Google Cloud offers research credits for academic and research "
                "institutions working on innovative projects."
            ),
            organization="Google",
            categories=["Cloud Compute"],
            amount="Up to $5,000",
            deadline=in_two_months,
            url="https://cloud.google.com/edu/researchers",
            source="google_cloud",
            location="Global",
            tags=["Google Cloud", "Research", SAMPLE_TAG],
        ),
        CandidateRecord(
            title="i3 Innovations Africa - Health Tech Grants",
            description=(
                "Supporting African-led health tech companies building data-driven "
                "access to healthcare. Focus on improving patient access to quality, "
                "affordable healthcare."
            ),
            organization="i3 Innovations Africa",
            categories=["Technology", "Health AI"],
            deadline=in_four_months,
            url="https://innovationsinafrica.com/application/",
            source="i3_innovations",
            location="Africa",
            eligibility=(
                "African-led and African-owned businesses focused on serving African "
                "markets. Must be tech-enabled, data-driven, and growth-stage."
            ),
            tags=["Health Tech", "Africa", "Innovation", SAMPLE_TAG],
        ),
        CandidateRecord(
            title="IEEE Computer Society Emerging Technology Fund",
            description=(
                "Grants ranging from $5,000 to $50,000 for innovative projects "
                "focused on emerging technologies."
            ),
            organization="IEEE Computer Society",
            categories=["Technology"],
            amount="$5,000 - $50,000",
            url="https://www.computer.org/communities/emerging-technology-fund",
            source="ieee_emerging_tech",
            location="Global",
            eligibility=(
                "Open to all countries. At least one team member must be an IEEE "
                "or IEEE CS member."
            ),
            tags=["IEEE", "Emerging Technology", SAMPLE_TAG],
        ),
        CandidateRecord(
            title="NRF Kenya Research Grants",
            description=(
                "National Research Fund Kenya offers grants for technology and "
                "innovation research projects in Kenya."
            ),
            organization="National Research Fund Kenya",
            categories=["Technology"],
            deadline=in_two_months,
            url="https://www.nrf.go.ke/category/grants-and-calls/",
            source="nrf_kenya",
            location="Kenya",
            tags=["Kenya", "Research", "NRF", SAMPLE_TAG],
        ),
        CandidateRecord(
            title="ICTWorks Technology Funding - Africa",
            description=(
                "Funding opportunities for ICT and technology projects in Africa, "
                "with focus on Kenya and East Africa."
            ),
            organization="ICTWorks",
            categories=["Technology"],
            deadline=in_two_months,
            url="https://www.ictworks.org/category/funding/",
            source="ictworks",
            location="Africa",
            tags=["ICT", "Technology", "Africa", SAMPLE_TAG],
        ),
    ]
