# Filename: rutz/fixtures.py
# Seed catalog loaded by MemStorage at construction and by
# DatabaseStorage.initialize() when the products table is empty.
# Each function returns fresh records so callers may mutate them freely.

from datetime import datetime
from decimal import Decimal
from typing import Dict, List

from rutz.schemas import (
    Badge,
    CommunityProject,
    GlobalIndigenousPlant,
    ImpactMetrics,
    ImpactMilestone,
    Inventory,
    JourneyStage,
    LearningModule,
    LiveImpactUpdate,
    Product,
    SupplyChainStep,
)
from rutz.utils import utcnow

CHESLATTA = "Cheslatta Carrier Nation Territory, British Columbia"
SOURCING = "Sourcing: The Cheslatta Carrier Nation's traditional and sacred territory. "
ASSET = "/assets/chaga-extract-powder-branded.png"


def _paper(title, year):
    return {"title": title, "url": "#", "year": year}


def products() -> List[Product]:
    rows = [
        dict(
            id="chaga-extract-powder",
            name="Chaga Extract Powder - β-glucans + Triterpenes",
            description=SOURCING + "Standardized dry extract powder concentrated with bioactive β-glucans "
                        "and triterpenes from wild-harvested Chaga mushrooms.",
            short_description=SOURCING + "Standardized β-glucans and triterpenes extract powder",
            price="89.99", category="Extract Powders", sector="Nutraceuticals / Supplements",
            plant_material="Chaga Mushroom",
            product_type="Standardized dry extract powder (β-glucans + triterpenes)",
            rating="4.9", review_count=89, qr_code="RUTZ-CHA-001",
            scientific_name="Inonotus obliquus",
            extraction_method="Water-ethanol dual extraction + standardization",
            bioactive_compounds=["β-glucans", "Betulinic acid", "Inotodiol", "Melanin complexes"],
            certifications=["Wild-harvested", "Organic", "GMP Certified"],
            research_papers=[_paper("Immunomodulatory Effects of Chaga β-glucans", 2023),
                             _paper("Antioxidant Properties of Inonotus obliquus Extracts", 2024)],
        ),
        dict(
            id="chaga-capsules",
            name="Chaga Extract Capsules",
            description=SOURCING + "Encapsulated chaga extract in vegetarian capsules, 500mg of "
                        "standardized extract each for daily immune support.",
            short_description=SOURCING + "500mg chaga extract in vegetarian capsules",
            price="59.99", category="Capsules", sector="Nutraceuticals / Supplements",
            plant_material="Chaga Mushroom",
            product_type="Encapsulated extract (capsules / tablets / softgels)",
            rating="4.7", review_count=156, qr_code="RUTZ-CHA-002",
            scientific_name="Inonotus obliquus",
            extraction_method="Dual extraction (water + ethanol)",
            bioactive_compounds=["β-glucans", "Triterpenes", "Polyphenols"],
            certifications=["Vegan", "Non-GMO", "Third-party tested"],
            research_papers=[_paper("Bioavailability of Encapsulated Mushroom Extracts", 2023)],
        ),
        dict(
            id="labrador-tea-premium-blend",
            name="Labrador Tea Premium Blend",
            description=SOURCING + "Artisanal blend of wild Labrador tea leaves, hand-harvested and "
                        "traditionally prepared, with a piney-citrus flavor profile.",
            short_description=SOURCING + "Premium wild Labrador tea blend in elegant tin",
            price="34.99", category="Premium Teas", sector="Traditional Medicine & Wellness Teas",
            plant_material="Labrador Tea (Rhododendron groenlandicum)",
            product_type="Premium loose-leaf herbal tea blend",
            rating="4.9", review_count=127, qr_code="RUTZ-LAB-001",
            scientific_name="Rhododendron groenlandicum",
            certifications=["Wild-harvested", "Traditional Processing"],
        ),
        dict(
            id="chaga-functional-latte",
            name="Plant-Based Chaga Functional Latte",
            description=SOURCING + "Creamy plant-based latte mix with chaga extract for a calm, "
                        "focused morning ritual.",
            short_description=SOURCING + "Plant-based latte mix with chaga extract",
            price="24.99", category="Latte Mixes", sector="Functional Foods & Beverages",
            plant_material="Chaga Mushroom",
            product_type="Plant-based functional latte (with extract)",
            rating="4.6", review_count=134, qr_code="RUTZ-CHA-004",
            scientific_name="Inonotus obliquus",
        ),
        dict(
            id="chaga-face-serum",
            name="Chaga Antioxidant Face Serum",
            description=SOURCING + "Lightweight serum pairing chaga melanin complexes with botanical "
                        "oils for antioxidant skin protection.",
            short_description=SOURCING + "Antioxidant face serum with chaga actives",
            price="79.99", category="Skincare", sector="Cosmetics & Personal Care",
            plant_material="Chaga Mushroom",
            product_type="Antioxidant face serum / cream",
            rating="4.8", review_count=92, qr_code="RUTZ-CHA-005",
            scientific_name="Inonotus obliquus",
        ),
        dict(
            id="chaga-wound-care-gel",
            name="Chaga Wound-Care Hydrogel",
            description=SOURCING + "Hydrogel dressing with chaga actives developed with clinical "
                        "research partners.",
            short_description=SOURCING + "Wound-care hydrogel with chaga actives",
            price="149.99", category="Medical Devices", sector="Biomedical / Pharma Leads",
            plant_material="Chaga Mushroom",
            product_type="Wound-care hydrogel with chaga actives",
            rating="4.9", review_count=34, qr_code="RUTZ-CHA-006",
            scientific_name="Inonotus obliquus",
        ),
        dict(
            id="turmeric-extract",
            name="Turmeric Extract",
            description=SOURCING + "High-curcumin turmeric extract for joint comfort and healthy "
                        "inflammatory response.",
            short_description=SOURCING + "High-curcumin standardized extract",
            price="49.99", category="Extract Powders", sector="Nutraceuticals / Supplements",
            plant_material="Turmeric",
            product_type="Standardized extract powder",
            rating="4.9", review_count=127, qr_code="RUTZ-TUR-001",
            scientific_name="Curcuma longa",
        ),
        dict(
            id="devils-club-root-extract",
            name="Devil's Club Root Extract",
            description=SOURCING + "Sacred Northwest Coast medicine, traditionally used for blood "
                        "sugar support and immune enhancement.",
            short_description=SOURCING + "Concentrated liquid root extract",
            price="68.99", category="Liquid Extracts", sector="Traditional Medicine & Wellness",
            plant_material="Devil's Club Root",
            product_type="Concentrated liquid herbal extract",
            rating="4.8", review_count=84, qr_code="RUTZ-DCL-001",
            scientific_name="Oplopanax horridus",
        ),
        dict(
            id="bearberry-leaf-capsules",
            name="Bearberry Leaf Capsules",
            description=SOURCING + "Uva-ursi leaf extract standardized for arbutin, a traditional "
                        "urinary health support.",
            short_description=SOURCING + "Traditional urinary tract support capsules",
            price="42.99", category="Capsules", sector="Traditional Medicine & Wellness",
            plant_material="Bearberry Leaves",
            product_type="Encapsulated herbal extract",
            rating="4.7", review_count=96, qr_code="RUTZ-BEA-001",
            scientific_name="Arctostaphylos uva-ursi",
        ),
        dict(
            id="eastern-white-cedar-tea",
            name="Eastern White Cedar Tea",
            description=SOURCING + "Vitamin C-rich needle tea, traditionally used to prevent scurvy.",
            short_description=SOURCING + "Vitamin C-rich needle tea",
            price="24.99", category="Herbal Teas", sector="Traditional Medicine & Wellness",
            plant_material="Eastern White Cedar Needles",
            product_type="Loose leaf herbal tea",
            rating="4.8", review_count=127, qr_code="RUTZ-EWC-001",
            scientific_name="Thuja occidentalis",
        ),
        dict(
            id="wild-rose-hip-powder",
            name="Wild Rose Hip Powder",
            description=SOURCING + "Hand-harvested rose hips milled into a vitamin C-rich superfood powder.",
            short_description=SOURCING + "Vitamin C-rich superfood powder",
            price="32.99", category="Superfood Powders", sector="Traditional Medicine & Wellness",
            plant_material="Wild Rose Hips",
            product_type="Fine ground superfood powder",
            rating="4.9", review_count=156, qr_code="RUTZ-WRH-001",
            scientific_name="Rosa acicularis",
        ),
        dict(
            id="ashwagandha-root",
            name="Ashwagandha Root Extract",
            description=SOURCING + "Adaptogenic herb for stress relief and vitality.",
            short_description=SOURCING + "Adaptogenic herb for stress relief and vitality",
            price="39.99", category="Extract Powders", sector="Nutraceuticals / Supplements",
            plant_material="Ashwagandha",
            product_type="Standardized extract powder",
            rating="4.8", review_count=93, qr_code="RUTZ-ASH-002",
            scientific_name="Withania somnifera",
            bioactive_compounds=["Withanolides", "Alkaloids", "Saponins"],
            certifications=["Organic", "Fair Trade", "Ayurvedic Validated"],
        ),
        dict(
            id="rhodiola-rosea",
            name="Rhodiola Rosea",
            description=SOURCING + "Arctic adaptogen for mental performance.",
            short_description=SOURCING + "Arctic adaptogen for mental performance",
            price="54.99", category="Extract Powders", sector="Nutraceuticals / Supplements",
            plant_material="Rhodiola Rosea",
            product_type="Standardized extract powder",
            rating="4.9", review_count=67, qr_code="RUTZ-RHO-005",
            scientific_name="Rhodiola rosea",
        ),
        dict(
            id="echinacea-extract",
            name="Echinacea Extract",
            description=SOURCING + "Immune system support from Indigenous traditional medicine.",
            short_description=SOURCING + "Immune system support from Indigenous traditional medicine",
            price="34.99", category="Extract Powders", sector="Nutraceuticals / Supplements",
            plant_material="Echinacea",
            product_type="Standardized extract powder",
            rating="4.5", review_count=112, qr_code="RUTZ-ECH-006",
            scientific_name="Echinacea purpurea",
        ),
        dict(
            id="green-tea-extract",
            name="Green Tea Extract",
            description=SOURCING + "EGCG-rich antioxidant extract from high-altitude tea gardens.",
            short_description=SOURCING + "EGCG-rich antioxidant powerhouse",
            price="27.99", category="Extract Powders", sector="Nutraceuticals / Supplements",
            plant_material="Green Tea",
            product_type="Standardized extract powder",
            rating="4.8", review_count=203, qr_code="RUTZ-GTE-007",
            scientific_name="Camellia sinensis",
        ),
    ]
    for row in rows:
        row.setdefault("origin", CHESLATTA)
        row.setdefault("image_url", ASSET)
        row.setdefault("in_stock", True)
    return [Product(**row) for row in rows]


def supply_chain_steps() -> List[SupplyChainStep]:
    return [
        SupplyChainStep(
            id="step-1", step_number=1, title="Sustainable Sourcing",
            description="Ethical harvesting with complete transparency from root to extract",
            image_url=ASSET,
            details="Botanical ingredients are sourced through partnerships that honor traditional "
                    "knowledge while keeping harvest sites healthy for future generations.",
            location="Certified organic farms and wild-harvest partners worldwide",
            certifications=["Organic Certified", "Fair Trade", "Sustainable Harvest"],
        ),
        SupplyChainStep(
            id="step-2", step_number=2, title="Precision Extraction",
            description="Advanced biotechnology preserves nature's potency",
            image_url=ASSET,
            details="Supercritical CO2 extraction preserves delicate bioactive compounds while "
                    "reaching pharmaceutical-grade purity.",
            location="Fraunhofer Institute, Germany",
            certifications=["GMP Certified", "Fraunhofer Validated", "ISO 9001"],
        ),
        SupplyChainStep(
            id="step-3", step_number=3, title="Purity Validation",
            description="Every batch verified for potency and purity",
            image_url=ASSET,
            details="Each batch is tested for potency, heavy metals, pesticides and microbials.",
            location="Certified Testing Laboratory, Germany",
            certifications=["ISO 17025", "FDA Registered", "European Pharmacopoeia"],
        ),
        SupplyChainStep(
            id="step-4", step_number=4, title="Sustainable Packaging",
            description="Biodegradable materials with QR tracking",
            image_url=ASSET,
            details="Each product carries a QR code linking to its supply chain story, from "
                    "harvest to delivery.",
            location="Sustainable Packaging Facility, Germany",
            certifications=["Biodegradable Certified", "Carbon Neutral", "Recyclable"],
        ),
    ]


def impact_metrics() -> ImpactMetrics:
    return ImpactMetrics(
        id="impact-2024",
        schools_built=12,
        families_supported=1247,
        hectares_protected=3890,
        amount_reinvested=Decimal("2300000.00"),
        research_papers=47,
        clinical_trials=23,
        patents=12,
    )


def community_projects() -> List[CommunityProject]:
    return [
        CommunityProject(
            id="proj-001", name="Kenora First Nation School",
            description="Building a new elementary school for 120 children with traditional "
                        "learning spaces and modern technology.",
            location="Kenora, Ontario, Canada", community="Kenora First Nation",
            category="education", status="active", progress=75,
            funding_goal=Decimal("450000.00"), current_funding=Decimal("337500.00"),
            start_date=datetime(2024, 3, 15), target_completion_date=datetime(2025, 6, 30),
            beneficiaries=120,
            created_at=datetime(2024, 3, 1), last_updated=datetime(2024, 8, 15),
        ),
        CommunityProject(
            id="proj-002", name="Sustainable Chaga Harvesting Program",
            description="Training 25 indigenous families in sustainable Chaga harvesting.",
            location="Thunder Bay, Ontario, Canada", community="Ojibwe Nation",
            category="environment", status="active", progress=60,
            funding_goal=Decimal("125000.00"), current_funding=Decimal("75000.00"),
            start_date=datetime(2024, 5, 1), target_completion_date=datetime(2025, 4, 30),
            beneficiaries=25,
            created_at=datetime(2024, 4, 15), last_updated=datetime(2024, 8, 14),
        ),
        CommunityProject(
            id="proj-003", name="Traditional Medicine Center",
            description="Community health center integrating traditional medicine with modern "
                        "healthcare.",
            location="Winnipeg, Manitoba, Canada", community="Dakota Nation",
            category="healthcare", status="planning", progress=25,
            funding_goal=Decimal("750000.00"), current_funding=Decimal("187500.00"),
            start_date=datetime(2025, 1, 15), target_completion_date=datetime(2026, 12, 31),
            beneficiaries=500,
            created_at=datetime(2024, 7, 1), last_updated=datetime(2024, 8, 10),
        ),
        CommunityProject(
            id="proj-004", name="Indigenous Language Preservation",
            description="Digital archive preserving Cree language and traditional plant knowledge.",
            location="Saskatchewan, Canada", community="Plains Cree Nation",
            category="education", status="completed", progress=100,
            funding_goal=Decimal("95000.00"), current_funding=Decimal("95000.00"),
            start_date=datetime(2023, 9, 1), target_completion_date=datetime(2024, 8, 31),
            completion_date=datetime(2024, 8, 20),
            beneficiaries=200,
            created_at=datetime(2023, 8, 15), last_updated=datetime(2024, 8, 20),
        ),
    ]


def live_impact_updates() -> List[LiveImpactUpdate]:
    return [
        LiveImpactUpdate(
            id="update-001", project_id="proj-001", update_type="progress",
            title="School Construction 75% Complete",
            description="Foundation completed, walls erected and roofing in progress.",
            previous_value=Decimal("65.00"), new_value=Decimal("75.00"), impact_metric="progress",
            created_at=datetime(2024, 8, 15, 14, 30),
        ),
        LiveImpactUpdate(
            id="update-002", project_id="proj-002", update_type="funding",
            title="Additional Funding Secured",
            description="Community fundraising raised an additional $15,000 for harvesting equipment.",
            previous_value=Decimal("60000.00"), new_value=Decimal("75000.00"),
            impact_metric="currentFunding",
            created_at=datetime(2024, 8, 14, 10, 15),
        ),
        LiveImpactUpdate(
            id="update-003", project_id="proj-004", update_type="completion",
            title="Language Archive Project Completed",
            description="Digitized 500+ traditional plant knowledge recordings.",
            previous_value=Decimal("95.00"), new_value=Decimal("100.00"), impact_metric="progress",
            created_at=datetime(2024, 8, 20, 16, 45),
        ),
        LiveImpactUpdate(
            id="update-004", project_id="proj-003", update_type="milestone",
            title="Site Planning Approved",
            description="Site plans approved by community council and local authorities.",
            previous_value=Decimal("15.00"), new_value=Decimal("25.00"), impact_metric="progress",
            created_at=datetime(2024, 8, 10, 9, 20),
        ),
        LiveImpactUpdate(
            id="update-005", project_id="proj-001", update_type="milestone",
            title="Traditional Learning Space Dedicated",
            description="Elder Mary Sinclair blessed the new traditional learning space.",
            created_at=datetime(2024, 8, 12, 11, 0),
        ),
    ]


def impact_milestones() -> List[ImpactMilestone]:
    return [
        ImpactMilestone(
            id="mile-001", project_id="proj-001", title="Foundation Complete",
            description="School foundation and basement construction finished",
            target_date=datetime(2024, 6, 30), achieved_date=datetime(2024, 6, 25), is_achieved=True,
            celebration_message="Foundation blessed by community elders in traditional ceremony",
            impact_value=25, created_at=datetime(2024, 3, 15),
        ),
        ImpactMilestone(
            id="mile-002", project_id="proj-001", title="Roof Installation",
            description="Complete roofing system installation for weather protection",
            target_date=datetime(2024, 9, 15), impact_value=50, created_at=datetime(2024, 3, 15),
        ),
        ImpactMilestone(
            id="mile-003", project_id="proj-002", title="First Harvest Training",
            description="Complete first sustainable harvesting training with 10 families",
            target_date=datetime(2024, 10, 31), impact_value=40, created_at=datetime(2024, 5, 1),
        ),
        ImpactMilestone(
            id="mile-004", project_id="proj-004", title="Archive Launch",
            description="Launch digital platform for community use",
            target_date=datetime(2024, 8, 15), achieved_date=datetime(2024, 8, 20), is_achieved=True,
            celebration_message="Over 200 community members registered on launch day",
            impact_value=100, created_at=datetime(2023, 9, 1),
        ),
    ]


def learning_modules() -> List[LearningModule]:
    return [
        LearningModule(
            id="intro-traditional-medicine",
            title="Introduction to Traditional Canadian Plant Medicine",
            description="Learn the fundamentals of Indigenous Canadian plant medicines and their "
                        "traditional uses",
            plant_material="Labrador tea", difficulty="beginner", estimated_time=15, xp_reward=100,
            content={"sections": [
                {"title": "What is Traditional Plant Medicine?", "type": "text",
                 "content": "Traditional plant medicine encompasses the knowledge and practices of "
                            "Indigenous peoples in using plants for healing."},
                {"title": "Traditional Use Video", "type": "video",
                 "content": "Traditional preparation and uses of Labrador tea by Inuit and Cree healers"},
                {"title": "Knowledge Check", "type": "quiz",
                 "content": "Basic quiz about traditional plant medicine principles"},
            ]},
        ),
        LearningModule(
            id="chaga-king-of-mushrooms",
            title="Chaga: The King of Mushrooms",
            description="Deep dive into Chaga mushroom benefits, preparation, and traditional uses",
            plant_material="Chaga Mushroom", difficulty="intermediate", estimated_time=25, xp_reward=150,
            content={"sections": [
                {"title": "Chaga Biology and Ecology", "type": "text",
                 "content": "Understanding the parasitic relationship of Chaga with birch trees."},
                {"title": "Traditional Preparation Methods", "type": "interactive",
                 "content": "Interactive guide to traditional Chaga preparation methods"},
            ]},
        ),
    ]


def badges() -> List[Badge]:
    return [
        Badge(id="first-purchase", name="First Purchase", description="Made your first purchase from RÜTZ",
              icon_url="/badges/first-purchase.svg", category="purchase",
              requirement={"type": "purchase_count", "value": 1}, rarity="common",
              xp_reward=50, loyalty_points_reward=100),
        Badge(id="learning-explorer", name="Learning Explorer",
              description="Completed your first learning module",
              icon_url="/badges/learning-explorer.svg", category="learning",
              requirement={"type": "modules_completed", "value": 1}, rarity="common",
              xp_reward=75, loyalty_points_reward=50),
        Badge(id="botanical-scholar", name="Botanical Scholar", description="Completed 5 learning modules",
              icon_url="/badges/botanical-scholar.svg", category="learning",
              requirement={"type": "modules_completed", "value": 5}, rarity="rare",
              xp_reward=200, loyalty_points_reward=250),
        Badge(id="community-champion", name="Community Champion",
              description="Contributed significantly to community impact",
              icon_url="/badges/community-champion.svg", category="community",
              requirement={"type": "impact_value", "value": 1000}, rarity="epic",
              xp_reward=500, loyalty_points_reward=1000),
    ]


def journey_stages() -> List[JourneyStage]:
    return [
        JourneyStage(id="explorer", name="Explorer", description="Beginning your botanical journey",
                     order=1, requirements={}, rewards={"xp": 0, "loyalty_points": 0},
                     icon_url="/journey/explorer.svg", color_scheme="green-100"),
        JourneyStage(id="seeker", name="Seeker", description="Actively learning and exploring",
                     order=2, requirements={"min_purchases": 1, "min_learning_progress": 25},
                     rewards={"xp": 100, "loyalty_points": 200, "discount": 5},
                     icon_url="/journey/seeker.svg", color_scheme="green-200"),
        JourneyStage(id="advocate", name="Advocate", description="Deep knowledge and community engagement",
                     order=3,
                     requirements={"min_purchases": 3, "min_learning_progress": 75,
                                   "min_loyalty_points": 1000},
                     rewards={"xp": 300, "loyalty_points": 500, "discount": 10},
                     icon_url="/journey/advocate.svg", color_scheme="green-300"),
        JourneyStage(id="guardian", name="Guardian", description="Botanical wisdom keeper and community leader",
                     order=4,
                     requirements={"min_purchases": 10, "min_learning_progress": 100,
                                   "min_loyalty_points": 5000},
                     rewards={"xp": 1000, "loyalty_points": 2000, "discount": 20},
                     icon_url="/journey/guardian.svg", color_scheme="green-500"),
    ]


# deterministic opening stock; the wound-care gel starts below its threshold
STOCK_LEVELS: Dict[str, int] = {
    "chaga-extract-powder": 320,
    "chaga-capsules": 180,
    "labrador-tea-premium-blend": 240,
    "chaga-functional-latte": 150,
    "chaga-face-serum": 60,
    "chaga-wound-care-gel": 15,
    "turmeric-extract": 400,
}
DEFAULT_STOCK = 250


def inventory(product_ids: List[str]) -> List[Inventory]:
    now = utcnow()
    return [
        Inventory(
            id=f"inv-{product_id}",
            product_id=product_id,
            current_stock=STOCK_LEVELS.get(product_id, DEFAULT_STOCK),
            last_updated=now,
        )
        for product_id in product_ids
    ]


def global_indigenous_plants() -> List[GlobalIndigenousPlant]:
    now = utcnow()
    rows = [
        ("echinacea-purpurea", "Purple Coneflower", "Echinacea purpurea", "North America",
         "United States, Canada",
         "Immune system support, wound healing, respiratory infections, snake bites",
         "Tinctures, capsules, dried root powder", "Traditional use for over 400 years",
         "Plains Indians, Cherokee, Lakota, Dakota", "Healing ceremonies, purification rituals", None),
        ("goldenseal", "Goldenseal", "Hydrastis canadensis", "North America",
         "Eastern United States, Southern Canada",
         "Digestive disorders, eye infections, respiratory ailments, skin conditions",
         "Root powder, tinctures, eye drops", "Used traditionally for over 300 years",
         "Cherokee, Iroquois, Kickapoo", None, None),
        ("american-ginseng", "American Ginseng", "Panax quinquefolius", "North America",
         "Eastern United States, Southern Canada",
         "Energy enhancement, stress adaptation, digestive support, respiratory health",
         "Root extracts, capsules, teas", "Traditional use for over 500 years",
         "Ojibwe, Menominee, Potawatomi", "Medicine lodge ceremonies, seasonal rituals", None),
        ("white-willow", "White Willow", "Salix alba", "North America", "Northern United States, Canada",
         "Pain relief, fever reduction, inflammation, headaches",
         "Bark extracts, teas, capsules", "Traditional use for over 400 years",
         "Chippewa, Cree, Blackfoot", None, None),
        ("cat-claw", "Cat's Claw", "Uncaria tomentosa", "South America", "Peru, Brazil, Colombia, Ecuador",
         "Immune system modulation, arthritis, digestive disorders, viral infections",
         "Bark extracts, capsules, teas", "Traditional use for over 2000 years",
         "Asháninka, Shipibo, Aguaruna, Cashibo", "Healing rituals, shamanic ceremonies", None),
        ("maca-root", "Maca", "Lepidium meyenii", "South America", "Peru (Andes Mountains)",
         "Energy enhancement, hormonal balance, fertility, endurance",
         "Root powder, capsules, extracts", "Traditional cultivation for over 3000 years",
         "Quechua, Inca descendants", "Harvest festivals, fertility rituals", None),
        ("camu-camu", "Camu Camu", "Myrciaria dubia", "South America", "Peru, Brazil (Amazon rainforest)",
         "Vitamin C source, immune support, antioxidant protection, mood enhancement",
         "Fruit powder, capsules, vitamin supplements", "Traditional use for over 800 years",
         "Shipibo, Yagua, Cocama", None, None),
        ("soursop", "Soursop", "Annona muricata", "Caribbean", "Caribbean Islands, Central America",
         "Cancer support, immune enhancement, parasitic infections, digestive health",
         "Leaf teas, fruit extracts, capsules", "Traditional use for over 600 years",
         "Taíno, Arawak, Carib", None, None),
        ("tea-tree", "Tea Tree", "Melaleuca alternifolia", "Australia", "Eastern Australia",
         "Antimicrobial applications, skin conditions, respiratory issues, wound healing",
         "Essential oils, topical creams, soaps", "Traditional use for over 40,000 years",
         "Bundjalung Aboriginal peoples",
         "Healing smoke ceremonies, medicinal preparation rituals", None),
        ("kakadu-plum", "Kakadu Plum", "Terminalia ferdinandiana", "Australia", "Northern Australia",
         "High vitamin C source, antioxidant support, immune enhancement, skin health",
         "Fruit extracts, vitamin supplements, skincare products",
         "Traditional use for over 40,000 years", "Yolŋu, Larrakia, Tiwi peoples",
         "Seasonal harvest ceremonies, Dreamtime stories", None),
        ("manuka", "Manuka", "Leptospermum scoparium", "New Zealand", "New Zealand",
         "Wound healing, digestive health, antimicrobial applications, skin conditions",
         "Honey, essential oils, topical preparations", "Traditional use for over 700 years",
         "Māori people", "Rongoā Māori (traditional healing), ceremonial preparations", None),
        ("kawakawa", "Kawakawa", "Piper excelsum", "New Zealand", "New Zealand",
         "Pain relief, digestive disorders, respiratory conditions, skin healing",
         "Leaf extracts, teas, topical balms", "Traditional use for over 700 years",
         "Māori people", "Rongoā Māori healing practices, ceremonial teas", None),
        ("african-potato", "African Potato", "Hypoxis hemerocallidea", "Africa",
         "Southern Africa (South Africa, Zimbabwe)",
         "Immune system support, prostate health, inflammatory conditions",
         "Root extracts, capsules, tinctures", "Traditional use for over 1000 years",
         "Zulu, Xhosa, Sotho peoples", "Traditional healing rituals, ancestral medicine ceremonies", None),
        ("buchu", "Buchu", "Barosma betulina", "Africa", "South Africa (Western Cape)",
         "Urinary tract health, kidney support, digestive disorders, antimicrobial applications",
         "Leaf extracts, teas, capsules", "Traditional use for over 1000 years",
         "Khoi (Khoikhoi), San peoples", "Traditional cleansing ceremonies, healing rituals",
         "Traditional veterinary applications for livestock urinary health"),
        ("devils-claw", "Devil's Claw", "Harpagophytum procumbens", "Africa",
         "Southern Africa (Namibia, Botswana, South Africa)",
         "Arthritis relief, anti-inflammatory, digestive health, pain management",
         "Root extracts, capsules, teas", "Traditional use for over 800 years",
         "San, Nama, Herero peoples", None,
         "Traditional use for livestock joint health and inflammation"),
    ]
    return [
        GlobalIndigenousPlant(
            id=plant_id, plant_name=name, scientific_name=scientific, region=region,
            country_of_origin=country, traditional_uses=uses, popular_product_form=forms,
            timeframe=timeframe, indigenous_tribes_or_group=tribes,
            associated_ceremony=ceremony, veterinary_use=veterinary,
            created_at=now, updated_at=now,
        )
        for (plant_id, name, scientific, region, country, uses, forms, timeframe,
             tribes, ceremony, veterinary) in rows
    ]
