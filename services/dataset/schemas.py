"""
Schema definitions for EDM4eic collections.

podio writes each collection member as its own branch named
``<collection>.<member>``; nested members such as a momentum vector become
``<collection>.momentum.x`` and so on. A schema maps the members the analysis
needs onto record fields; dotted field names become nested records.
"""

# Members read from every particle collection
PARTICLE_FIELDS = ["energy", "momentum.x", "momentum.y", "momentum.z"]

# Members read from every inclusive-kinematics collection
KINEMATICS_FIELDS = ["Q2", "x"]

# Collection type -> fields
COLLECTION_TYPE_FIELDS = {
    "particles": PARTICLE_FIELDS,
    "kinematics": KINEMATICS_FIELDS,
}

# Known EDM4eic collections and their type
KNOWN_COLLECTIONS = {
    "InclusiveKinematicsElectron": "kinematics",
    "InclusiveKinematicsTruth": "kinematics",
    "InclusiveKinematicsDA": "kinematics",
    "InclusiveKinematicsJB": "kinematics",
    "InclusiveKinematicsSigma": "kinematics",
    "InclusiveKinematicsESigma": "kinematics",
    "ReconstructedParticles": "particles",
    "ReconstructedChargedParticles": "particles",
    "GeneratedParticles": "particles",
    "MCParticles": "particles",
}


def get_collection_fields(collection: str, collection_type: str = None) -> list[str]:
    """
    Fields to read for a collection.

    Args:
        collection: Collection name
        collection_type: "particles" or "kinematics"; looked up when omitted

    Returns:
        List of (possibly dotted) member names

    Raises:
        KeyError: If the collection type cannot be determined
    """
    if collection_type is None:
        collection_type = KNOWN_COLLECTIONS[collection]
    return list(COLLECTION_TYPE_FIELDS[collection_type])


def get_branch_name(collection: str, field: str) -> str:
    """Branch holding one member of a collection."""
    return f"{collection}.{field}"


def get_branch_mapping(collection: str, collection_type: str = None) -> dict[str, str]:
    """
    Map branch names of a collection to record fields.

    Returns:
        Dict of {full_branch: field}
    """
    return {
        get_branch_name(collection, field): field
        for field in get_collection_fields(collection, collection_type)
    }
