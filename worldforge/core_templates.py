# worldforge/core_templates.py
"""
Definitions of the system ("Core") templates.

These are upserted as global templates (``world_id`` null, ``is_system``
true) by the admin seed operation, and copied into each new world's Core
folder during world creation.
"""
from typing import Any, Dict, List, Optional


def short(field_id: str, name: str, prompt: str, required: bool = False) -> Dict[str, Any]:
    return _field(field_id, name, "shortText", prompt, required)


def long(field_id: str, name: str, prompt: str, required: bool = False) -> Dict[str, Any]:
    return _field(field_id, name, "longText", prompt, required)


def select(field_id: str, name: str, options: List[str], prompt: str, required: bool = False) -> Dict[str, Any]:
    return _field(field_id, name, "select", prompt, required, options)


def multi(field_id: str, name: str, options: List[str], prompt: str) -> Dict[str, Any]:
    return _field(field_id, name, "multiSelect", prompt, False, options)


def _field(
    field_id: str,
    name: str,
    field_type: str,
    prompt: str,
    required: bool,
    options: Optional[List[str]] = None,
) -> Dict[str, Any]:
    field: Dict[str, Any] = {"id": field_id, "name": name, "type": field_type, "prompt": prompt}
    if required:
        field["required"] = True
    if options:
        field["options"] = options
    return field


CORE_TEMPLATES: List[Dict[str, Any]] = [
    {
        "name": "Character",
        "category": "people",
        "icon": "user",
        "description": "A person, hero, villain or bystander in the world",
        "fields": [
            short("tf-char-name", "Name", "Full name and common aliases", required=True),
            short("tf-char-concept", "One-Line Concept", "Who they are at a glance", required=True),
            select("tf-char-role", "Story Role",
                   ["Protagonist", "Antagonist", "Ally", "Mentor", "Rival", "Neutral", "Other"],
                   "Their role in the narrative"),
            short("tf-char-pronouns", "Pronouns", "How they are referred to"),
            long("tf-char-personality", "Personality", "Temperament, quirks, how others see them"),
            long("tf-char-motivations", "Motivations", "What they want and why"),
            long("tf-char-flaws", "Flaws & Fears", "What holds them back"),
        ],
    },
    {
        "name": "Location",
        "category": "places",
        "icon": "map-pin",
        "description": "A place: a city, a region, a ruin, a room",
        "fields": [
            short("tf-loc-name", "Name", "What the place is called", required=True),
            long("tf-loc-description", "Description", "What a visitor sees first", required=True),
            select("tf-loc-category", "Category",
                   ["Settlement", "Region", "Landmark", "Building", "Dungeon", "Wilderness", "Other"],
                   "The kind of place"),
            short("tf-loc-climate", "Climate", "Weather and seasons"),
            select("tf-loc-safety", "Safety",
                   ["Safe", "Guarded", "Risky", "Dangerous", "Deadly"],
                   "How dangerous it is to visit"),
            long("tf-loc-points-of-interest", "Points of Interest", "Notable sights and secrets"),
        ],
    },
    {
        "name": "Object",
        "category": "things",
        "icon": "box",
        "description": "A mundane or notable item",
        "fields": [
            short("tf-obj-name", "Name", "What the object is called", required=True),
            long("tf-obj-description", "Description", "Look, feel and notable details", required=True),
            select("tf-obj-category", "Category",
                   ["Tool", "Weapon", "Armor", "Clothing", "Artwork", "Document", "Vehicle", "Other"],
                   "The kind of object"),
            short("tf-obj-materials", "Materials", "What it is made of"),
            select("tf-obj-condition", "Condition",
                   ["Pristine", "Good", "Worn", "Damaged", "Broken"],
                   "Its current state"),
            long("tf-obj-origin", "Origin", "Who made it and how it got here"),
        ],
    },
    {
        "name": "Organization",
        "category": "groups",
        "icon": "users",
        "description": "A guild, faction, company or order",
        "fields": [
            short("tf-org-name", "Name", "Official and informal names", required=True),
            short("tf-org-summary", "Summary", "What the group is in one line", required=True),
            select("tf-org-type", "Type",
                   ["Guild", "Cult", "Military", "Criminal", "Mercantile", "Religious", "Political", "Academic", "Other"],
                   "The kind of organization"),
            long("tf-org-purpose", "Purpose", "Stated and hidden goals"),
            select("tf-org-scope", "Scope", ["Local", "Regional", "National", "Global"],
                   "How far its reach extends"),
            long("tf-org-governance", "Leadership", "Who leads and how decisions are made"),
        ],
    },
    {
        "name": "Culture",
        "category": "groups",
        "icon": "globe",
        "description": "Shared customs, values and ways of living",
        "fields": [
            short("tf-cult-name", "Culture Name", "What the culture is called", required=True),
            short("tf-cult-identity", "One-Line Identity", "What defines it at a glance", required=True),
            long("tf-cult-values", "Core Values", "What the culture prizes"),
            long("tf-cult-social-structure", "Social Structure", "Classes, castes, kinship"),
            long("tf-cult-customs-taboos", "Customs & Taboos", "What is expected and what is forbidden"),
            long("tf-cult-etiquette", "Etiquette", "Greetings, hospitality, insults"),
        ],
    },
    {
        "name": "Species",
        "category": "peoples",
        "icon": "dna",
        "description": "A sapient or non-sapient species",
        "fields": [
            short("tf-spec-name", "Species Name", "Enter the species name", required=True),
            short("tf-spec-identity", "One-Line Identity", "What defines them at a glance", required=True),
            select("tf-spec-morphology", "Morphology Archetype",
                   ["Humanoid", "Quadruped", "Avian", "Serpentine", "Arthropod", "Amorphous",
                    "Plantlike", "Aquatic", "Energy/Elemental", "Construct", "Other"],
                   "Select the basic body structure", required=True),
            short("tf-spec-size", "Typical Size & Build", "Height/length, mass, posture"),
            multi("tf-spec-habitats", "Preferred Habitats & Range",
                  ["Forest", "Desert", "Tundra", "Grassland", "Mountains", "Coastal", "Deep Ocean",
                   "Freshwater", "Caves", "Volcanic", "Arctic", "Tropical", "Urban", "Aerial",
                   "Underground", "Swamp/Marsh"],
                  "Select preferred biomes and environments"),
            select("tf-spec-intelligence", "Cognition & Intelligence Tier",
                   ["Animal", "Proto-sapient", "Sapient", "Supra-sapient"],
                   "Select cognitive development level"),
            long("tf-spec-temperament", "Temperament & Social Behavior",
                 "Solitary/pack, hierarchy, cooperation/competition tendencies"),
        ],
    },
    {
        "name": "Religion/Philosophy",
        "category": "beliefs",
        "icon": "sun",
        "description": "A faith, philosophy or spiritual movement",
        "fields": [
            short("tf-relig-name", "Tradition Name",
                  "Enter the name of the religious or philosophical tradition", required=True),
            short("tf-relig-identity", "One-Line Identity", "What defines it at a glance", required=True),
            select("tf-relig-type", "Tradition Type",
                   ["Religion", "Philosophy", "Spiritual Movement", "Cult", "Mystery Tradition", "Syncretic"],
                   "Select the type of tradition", required=True),
            long("tf-relig-tenets", "Core Tenets", "Foundational principles, aims"),
            long("tf-relig-cosmology", "Cosmology & Origins", "Creation/origin story, metaphysics"),
            long("tf-relig-rites", "Rites & Practices", "Worship, meditation, pilgrimage"),
        ],
    },
    {
        "name": "Government & Law",
        "category": "institutions",
        "icon": "landmark",
        "description": "A governing body and the laws it keeps",
        "fields": [
            short("tf-gov-name", "Government Name", "Official name of the polity or body", required=True),
            short("tf-gov-identity", "One-Line Identity", "What defines it at a glance", required=True),
            select("tf-gov-type", "Governance Type",
                   ["Monarchy", "Republic", "Democracy", "Oligarchy", "Theocracy", "Council",
                    "Tribal", "Empire", "Anarchy", "Other"],
                   "How power is held", required=True),
            select("tf-gov-jurisdiction", "Jurisdiction Level",
                   ["Village", "City", "Province", "Nation", "Empire", "Planetary", "Interstellar"],
                   "How far its authority reaches"),
            long("tf-gov-rights", "Rights & Protections", "What subjects or citizens are guaranteed"),
            long("tf-gov-punishments", "Punishments", "How crimes are punished"),
        ],
    },
    {
        "name": "Power System",
        "category": "systems",
        "icon": "zap",
        "description": "Magic, psionics, technology or any system of power",
        "fields": [
            short("tf-power-name", "System Name", "What the power is called", required=True),
            short("tf-power-identity", "One-Line Identity", "What defines it at a glance", required=True),
            select("tf-power-source", "Power Source",
                   ["Innate", "Divine", "Arcane", "Technological", "Psionic", "Elemental", "Pact", "Other"],
                   "Where the power comes from"),
            select("tf-power-access", "Access",
                   ["Universal", "Common", "Rare", "Bloodline", "Trained", "Granted"],
                   "Who can use it"),
            long("tf-power-costs", "Costs & Limits", "What using it takes from the user"),
            long("tf-power-risks", "Risks", "What goes wrong when it fails"),
        ],
    },
    {
        "name": "Economy & Trade",
        "category": "systems",
        "icon": "coins",
        "description": "How goods, money and labor move",
        "fields": [
            short("tf-econ-name", "Economy Name", "Name of the economic sphere", required=True),
            short("tf-econ-identity", "One-Line Identity", "What defines it at a glance", required=True),
            long("tf-econ-currency", "Currency", "Coins, barter, credit"),
            long("tf-econ-resources", "Key Resources", "What is produced and what is scarce"),
            long("tf-econ-trade-routes", "Trade Routes", "Roads, sea lanes, portals"),
            long("tf-econ-regulation", "Regulation", "Tariffs, guild rules, black markets"),
        ],
    },
    {
        "name": "Creature (Fauna)",
        "category": "nature",
        "icon": "paw",
        "description": "An animal or beast of the natural world",
        "fields": [
            short("tf-creature-name", "Creature Name", "Common and scholarly names", required=True),
            long("tf-creature-description", "Description", "Appearance and notable traits", required=True),
            select("tf-creature-type", "Creature Type",
                   ["Mammal", "Bird", "Reptile", "Amphibian", "Fish", "Insect", "Other"],
                   "Broad classification"),
            select("tf-creature-size", "Size",
                   ["Tiny", "Small", "Medium", "Large", "Huge", "Gargantuan"],
                   "Typical adult size"),
            select("tf-creature-temperament", "Temperament",
                   ["Docile", "Skittish", "Territorial", "Aggressive", "Predatory"],
                   "How it reacts to people"),
            long("tf-creature-diet", "Diet", "What it eats and how it hunts or forages"),
        ],
    },
    {
        "name": "Plant/Fungi",
        "category": "nature",
        "icon": "leaf",
        "description": "A plant, fungus or other flora",
        "fields": [
            short("tf-plant-name", "Name", "Common and scholarly names", required=True),
            long("tf-plant-description", "Description", "Appearance, scent, texture", required=True),
            select("tf-plant-classification", "Classification",
                   ["Tree", "Shrub", "Herb", "Grass", "Vine", "Fungus", "Moss", "Aquatic", "Other"],
                   "Broad classification"),
            short("tf-plant-habitat", "Habitat", "Where it grows"),
            select("tf-plant-edibility", "Edibility",
                   ["Edible", "Edible when prepared", "Inedible", "Toxic", "Deadly"],
                   "Is it safe to eat"),
            long("tf-plant-medicinal", "Medicinal Uses", "Remedies, poisons, reagents"),
        ],
    },
    {
        "name": "Material/Resource",
        "category": "things",
        "icon": "gem",
        "description": "A raw material or harvestable resource",
        "fields": [
            short("tf-material-name", "Name", "What the material is called", required=True),
            long("tf-material-description", "Description", "Appearance and feel", required=True),
            select("tf-material-category", "Category",
                   ["Metal", "Stone", "Gem", "Wood", "Fiber", "Hide", "Reagent", "Fuel", "Other"],
                   "Broad category"),
            select("tf-material-state", "State", ["Solid", "Liquid", "Gas", "Plasma", "Other"],
                   "Physical state at rest"),
            long("tf-material-properties", "Properties", "Hardness, conductivity, magical affinity"),
            long("tf-material-extraction", "Extraction", "How it is mined, grown or gathered"),
        ],
    },
    {
        "name": "Monster",
        "category": "threats",
        "icon": "skull",
        "description": "A dangerous or unnatural creature",
        "fields": [
            short("tf-monster-name", "Name", "What people call it", required=True),
            long("tf-monster-description", "Description", "What it looks like", required=True),
            select("tf-monster-origin", "Origin",
                   ["Natural", "Cursed", "Summoned", "Created", "Undead", "Otherworldly", "Unknown"],
                   "Where it came from"),
            select("tf-monster-threat", "Threat Level",
                   ["Nuisance", "Dangerous", "Deadly", "Catastrophic"],
                   "How much danger it poses"),
            long("tf-monster-behavior", "Behavior", "Habits, hunting patterns, lairs"),
            long("tf-monster-tactics", "Tactics & Weaknesses", "How it fights and how it can be beaten"),
        ],
    },
    {
        "name": "Magic Item",
        "category": "things",
        "icon": "wand",
        "description": "An object imbued with power",
        "fields": [
            short("tf-magic-item-name", "Name", "What the item is called", required=True),
            long("tf-magic-item-description", "Description", "Look and aura", required=True),
            select("tf-magic-item-category", "Category",
                   ["Weapon", "Armor", "Wondrous", "Ring", "Staff", "Potion", "Scroll", "Artifact", "Other"],
                   "Broad category"),
            select("tf-magic-item-activation", "Activation",
                   ["Passive", "Command Word", "Gesture", "Attunement", "Ritual", "Consumable"],
                   "How it is used"),
            long("tf-magic-item-effects", "Effects", "What it does"),
            long("tf-magic-item-risks", "Costs & Risks", "Drawbacks, curses, side effects"),
        ],
    },
    {
        "name": "Event",
        "category": "history",
        "icon": "calendar",
        "description": "Something that happened, or will",
        "fields": [
            short("tf-event-name", "Name", "What the event is known as", required=True),
            long("tf-event-summary", "Summary", "What happened in brief", required=True),
            select("tf-event-type", "Event Type",
                   ["Battle", "Disaster", "Festival", "Discovery", "Political", "Religious", "Personal", "Other"],
                   "The kind of event"),
            short("tf-event-timeframe", "Timeframe", "When it happened and how long it lasted"),
            long("tf-event-participants", "Participants", "Who was involved"),
            long("tf-event-outcomes", "Outcomes", "What changed afterwards"),
        ],
    },
    {
        "name": "Recipe",
        "category": "crafts",
        "icon": "flask",
        "description": "A procedure for making something",
        "fields": [
            short("tf-recipe-name", "Name", "What the recipe produces", required=True),
            short("tf-recipe-purpose", "Purpose", "Why someone would make it", required=True),
            select("tf-recipe-domain", "Domain",
                   ["Cooking", "Alchemy", "Smithing", "Enchanting", "Medicine", "Engineering", "Other"],
                   "Field of craft"),
            select("tf-recipe-complexity", "Complexity",
                   ["Trivial", "Simple", "Moderate", "Complex", "Masterwork"],
                   "How hard it is to make"),
            long("tf-recipe-ingredients", "Ingredients", "Components and quantities"),
            long("tf-recipe-procedure", "Procedure", "Steps to follow"),
        ],
    },
    {
        "name": "Illness",
        "category": "threats",
        "icon": "biohazard",
        "description": "A disease, curse or affliction",
        "fields": [
            short("tf-illness-name", "Name", "Common and clinical names", required=True),
            long("tf-illness-description", "Description", "What the illness is", required=True),
            select("tf-illness-etiology", "Cause",
                   ["Bacterial", "Viral", "Parasitic", "Fungal", "Magical", "Curse", "Genetic", "Unknown"],
                   "What causes it"),
            multi("tf-illness-transmission", "Transmission",
                  ["Airborne", "Contact", "Bodily Fluids", "Vector", "Food/Water", "Magical", "Not Contagious"],
                  "How it spreads"),
            long("tf-illness-symptoms", "Symptoms", "Signs and progression"),
            select("tf-illness-severity", "Severity", ["Mild", "Moderate", "Severe", "Fatal"],
                   "How bad it gets untreated"),
        ],
    },
]

CORE_TEMPLATE_NAMES = [template["name"] for template in CORE_TEMPLATES]
