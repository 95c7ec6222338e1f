from nomadmatch.models.user import UserProfile, PROFILE_FIELDS, profile_to_dict, apply_fields

__all__ = ["UserProfile", "PROFILE_FIELDS", "profile_to_dict", "apply_fields"]
