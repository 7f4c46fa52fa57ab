"""Rental agreement terms text, generated once from the booking's frozen fields"""

from datetime import date

from ...config import CURRENCY_SYMBOL, GOVERNING_LAW, PLATFORM_NAME
from ...models import Booking


def format_date(value: date) -> str:
    return value.strftime("%B %d, %Y")


def format_amount(value) -> str:
    return f"{CURRENCY_SYMBOL}{float(value or 0):,.2f}"


def generate_rental_terms(booking: Booking) -> str:
    """
    Build the terms and conditions for a booking.

    Output depends only on the booking's dates and pricing, so regenerating for the
    same booking yields the same text. The agreement stores it verbatim.
    """
    clauses = [
        f"RENTAL PERIOD: The vehicle shall be rented from {format_date(booking.start_date)} "
        f"to {format_date(booking.end_date)}.",
        f"RENTAL RATE: The daily rental rate is {format_amount(booking.daily_rate)} "
        f"for a total of {booking.total_days} day(s).",
        f"TOTAL AMOUNT: The total rental amount is {format_amount(booking.total_amount)}, "
        "inclusive of service fees and security deposit.",
        f"SECURITY DEPOSIT: A security deposit of {format_amount(booking.security_deposit)} "
        "is required and will be refunded upon satisfactory return of the vehicle.",
        "VEHICLE CONDITION: The Renter agrees to return the vehicle in the same condition "
        "as received, normal wear and tear excepted.",
        "FUEL POLICY: The vehicle must be returned with the same fuel level as when picked up. "
        "Failure to do so will result in additional charges.",
        "PROHIBITED USES: The vehicle shall not be used for illegal purposes, racing, towing, "
        "or any activity that may damage the vehicle.",
        "INSURANCE & LIABILITY: The Renter shall be responsible for any damage, loss, or theft "
        "of the vehicle during the rental period not covered by insurance.",
        "TRAFFIC VIOLATIONS: The Renter is responsible for all traffic violations and fines "
        "incurred during the rental period.",
        "EARLY TERMINATION: Either party may terminate this agreement with proper notice. "
        "Refunds will be calculated based on unused rental days minus applicable fees.",
        "IDENTITY VERIFICATION: Both parties confirm that their identities have been verified "
        f"through {PLATFORM_NAME}'s identity verification system (Government ID + Selfie Verification).",
        "DISPUTE RESOLUTION: Any disputes arising from this agreement shall first be mediated "
        f"through {PLATFORM_NAME}'s dispute resolution process.",
        "PHYSICAL VERIFICATION: The Renter is required to undergo a physical identity check at "
        "the pickup location. The Owner must verify the Renter's face matches their submitted ID.",
        f"GOVERNING LAW: This agreement is governed by the laws of {GOVERNING_LAW}.",
    ]

    lines = ["TERMS AND CONDITIONS OF RENTAL AGREEMENT"]
    for number, clause in enumerate(clauses, start=1):
        lines.append(f"{number}. {clause}")
    return "\n\n".join(lines)


def vehicle_snapshot(vehicle) -> dict:
    """Vehicle details copied onto the agreement at generation time"""
    return {
        "make": vehicle.make,
        "model": vehicle.model,
        "year": vehicle.year,
        "plate_number": vehicle.plate_number,
        "color": vehicle.color,
    }
