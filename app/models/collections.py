"""Firestore collection catalog and reference field declarations.

Firestore has no DDL. Collection names and the reference fields each
collection holds live here as the single source of truth.
"""

from dataclasses import dataclass

COLLECTION_USERS = "users"
COLLECTION_CITIES = "cities"
COLLECTION_GOVERNORATES = "governorates"
COLLECTION_PROJECTS = "projects"
COLLECTION_PROPERTY_TYPES = "property_types"
COLLECTION_FINISHING_TYPES = "finishing_types"
COLLECTION_REQUESTS = "requests"
COLLECTION_PROPOSALS = "proposals"
COLLECTION_STORIES = "stories"


@dataclass(frozen=True)
class CollectionConfig:
    """Display metadata for an admin collection."""

    name: str
    display_name: str
    icon: str
    description: str


COLLECTION_CONFIGS: dict[str, CollectionConfig] = {
    config.name: config
    for config in (
        CollectionConfig(
            "users", "Users", "PersonOutline", "User profiles and authentication data"
        ),
        CollectionConfig(
            "categories", "Categories", "Category", "Property categories (e.g., Chalet, Villa)"
        ),
        CollectionConfig(
            "cities", "Cities", "LocationCity", "City listings with governorate references"
        ),
        CollectionConfig("countries", "Countries", "Public", "Country listings"),
        CollectionConfig(
            "ff_user_push_notifications",
            "Push Notifications",
            "Notifications",
            "Firebase push notifications to users",
        ),
        CollectionConfig(
            "finishing_types",
            "Finishing Types",
            "HomeWork",
            "Types of property finishing (e.g., Full, Semi)",
        ),
        CollectionConfig("governorates", "Governorates", "Map", "Regional governorate listings"),
        CollectionConfig("home_ads", "Home Ads", "Campaign", "Advertisement banners for homepage"),
        CollectionConfig(
            "notifications",
            "Notifications",
            "NotificationsActive",
            "User notifications for requests and proposals",
        ),
        CollectionConfig(
            "projects", "Projects", "Business", "Construction and property projects"
        ),
        CollectionConfig(
            "property_types",
            "Property Types",
            "Home",
            "Types of properties (e.g., Residential, Commercial)",
        ),
        CollectionConfig(
            "proposals", "Proposals", "Description", "Supplier proposals for client requests"
        ),
        CollectionConfig(
            "requests", "Requests", "RequestPage", "Client requests for construction services"
        ),
        CollectionConfig(
            "rolla_story", "Rolla Story", "AutoStories", "Company story and about information"
        ),
        CollectionConfig("stories", "Stories", "Photo", "User-generated stories and content"),
        CollectionConfig("types", "Types", "Label", "General type classifications"),
    )
}

# Reference fields per collection: field name -> target collection
REFERENCE_FIELDS: dict[str, dict[str, str]] = {
    COLLECTION_CITIES: {"gover": COLLECTION_GOVERNORATES},
    COLLECTION_PROJECTS: {
        "property_type": COLLECTION_PROPERTY_TYPES,
        "finishing_type": COLLECTION_FINISHING_TYPES,
    },
    COLLECTION_REQUESTS: {
        "client": COLLECTION_USERS,
        "acceptedProposal": COLLECTION_PROPOSALS,
        "acceptedSupplier": COLLECTION_USERS,
    },
    COLLECTION_PROPOSALS: {
        "request": COLLECTION_REQUESTS,
        "supplier": COLLECTION_USERS,
    },
    COLLECTION_STORIES: {"storyCreator": COLLECTION_USERS},
}
