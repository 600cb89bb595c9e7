"""Built-in PharmaCare knowledge base.

Seeded once at import time and never written to afterwards. A JSONL catalog
configured under ``knowledge.source`` replaces it wholesale.
"""

from typing import Tuple

from .types import KnowledgeEntry


def _lines(*parts: str) -> str:
    return "\n".join(parts)


KNOWLEDGE_BASE: Tuple[KnowledgeEntry, ...] = (
    KnowledgeEntry(
        id="med-paracetamol",
        title="Paracetamol",
        category="medication",
        tags=("paracetamol", "panado", "pain", "fever", "headache"),
        answer=_lines(
            "💊 **Paracetamol (Panado)**",
            "• Uses: Pain relief, fever reduction",
            "• Adult dosage: 500mg-1000mg every 4-6 hours (max 4000mg/day)",
            "• Price: From E25 • Availability: Over-the-counter",
            "• Safety: Avoid alcohol, do not exceed recommended dose, consult a doctor if symptoms persist beyond 3 days.",
        ),
        follow_ups=("Show me pain relief options", "Can I combine it with ibuprofen?"),
    ),
    KnowledgeEntry(
        id="med-amoxicillin",
        title="Amoxicillin",
        category="medication",
        tags=("amoxicillin", "antibiotic", "infection", "bacteria"),
        answer=_lines(
            "💊 **Amoxicillin**",
            "• Type: Prescription antibiotic (250mg & 500mg)",
            "• Uses: Bacterial infections (respiratory, skin, ENT)",
            "• Price: E85-E150 • Requires a valid prescription",
            "• Safety: Finish full course, report allergic reactions, store at room temperature.",
        ),
        follow_ups=("How do I upload a prescription?", "What infections does it treat?"),
    ),
    KnowledgeEntry(
        id="med-vitamins",
        title="Vitamins & Supplements",
        category="medication",
        tags=("vitamin", "supplement", "immune", "multivitamin", "omega"),
        answer=_lines(
            "🌿 **Vitamins & Supplements**",
            "• Vitamin C (E45) – Immune support",
            "• Multivitamins (E78) – Daily nutrition",
            "• Vitamin D (E55) – Bone health",
            "• Omega-3 (E120) – Heart health",
            "• Probiotics (E95) – Gut health",
            "All third-party tested and available without prescription.",
        ),
        follow_ups=("Any immune support bundles?", "Do you have kid-friendly vitamins?"),
    ),
    KnowledgeEntry(
        id="delivery-standard",
        title="Standard Delivery",
        category="delivery",
        tags=("delivery", "shipping", "tracking", "standard", "time"),
        answer=_lines(
            "🚚 **Standard Delivery (Eswatini)**",
            "• Coverage: Nationwide",
            "• Timeline: 24-48 hours",
            "• Cost: Free above E500, otherwise E80",
            "• Tracking & SMS updates included",
            "• Packaging: Tamper-proof & temperature-safe",
        ),
        follow_ups=("Do you offer express delivery?", "Where is my order now?"),
    ),
    KnowledgeEntry(
        id="delivery-express",
        title="Express Delivery",
        category="delivery",
        tags=("express", "same-day", "manzini", "mbabane"),
        answer=_lines(
            "⚡ **Express Delivery**",
            "• Cities: Manzini & Mbabane",
            "• Timeline: Same-day if ordered before 14:00",
            "• Cost: E150 flat fee",
            "• Includes real-time courier tracking & contactless option",
        ),
        follow_ups=("Do you deliver to Siteki?", "Can I pick up in-store?"),
    ),
    KnowledgeEntry(
        id="payment-methods",
        title="Payment Methods",
        category="payment",
        tags=("payment", "methods", "momo", "card", "cash"),
        answer=_lines(
            "💳 **Payment Options**",
            "• MTN MoMo (instant confirmation)",
            "• Visa / MasterCard",
            "• Bank transfer & EFT",
            "• Cash on delivery",
            "All payments are encrypted. MTN MoMo is the fastest choice.",
        ),
        follow_ups=("How do I pay with MoMo?", "Do you offer payment plans?"),
    ),
    KnowledgeEntry(
        id="contact-eswatini",
        title="Contact & Hours",
        category="contact",
        tags=("contact", "hours", "phone", "email", "store"),
        answer=_lines(
            "🕒 **PharmaCare Eswatini Contact**",
            "• Location: Manzini CBD, opposite Bhunu Mall",
            "• Phone: +268 2404 1234",
            "• WhatsApp: +268 7800 1234",
            "• Email: support@pharmacare.org",
            "• Hours: Mon-Fri 08:00-20:00 • Sat 09:00-18:00 • Sun 10:00-16:00",
        ),
        follow_ups=("Do you have a Mbabane branch?", "How do I reach the pharmacist?"),
    ),
    KnowledgeEntry(
        id="emergency-services",
        title="Emergency",
        category="emergency",
        tags=("emergency", "ambulance", "hospital", "urgent"),
        answer=_lines(
            "🚨 **Emergency Contacts (Eswatini)**",
            "• National Emergency: 933",
            "• Mbabane Government Hospital: +268 2408 5111",
            "• Good Shepherd Hospital (Siteki): +268 2343 7700",
            "For urgent care outside hours, visit your nearest hospital or emergency clinic.",
        ),
        follow_ups=("Do you have after-hours service?", "Can I speak to a pharmacist now?"),
    ),
    KnowledgeEntry(
        id="eswatini-cities",
        title="Eswatini Cities & Coverage",
        category="region",
        tags=("eswatini", "manzini", "mbabane", "siteki", "ezulwini"),
        answer=_lines(
            "🗺️ **Service Coverage in Eswatini**",
            "We support deliveries and prescriptions in: Manzini, Mbabane, Ezulwini, Nhlangano, Siteki, Piggs Peak, and most rural clinics.",
            "For remote areas, we partner with SwaziPost pick-up points.",
        ),
        follow_ups=("Do you have local pickup points?", "How long to reach rural areas?"),
    ),
    KnowledgeEntry(
        id="prescription-upload",
        title="Prescription Upload",
        category="service",
        tags=("prescription", "upload", "doctor", "rx", "scan"),
        answer=_lines(
            "📋 **Prescription Upload Guide**",
            "1. Tap “Upload Prescription”",
            "2. Add clear photos (JPG/PNG/PDF, max 5MB)",
            "3. Provide patient & doctor details",
            "4. Pharmacists verify in 2-4 hours and notify via SMS/Email",
            "We only dispense once a licensed pharmacist approves the request.",
        ),
        follow_ups=("Can I upload multiple prescriptions?", "How will I know it’s approved?"),
    ),
)
