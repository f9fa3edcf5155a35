"""Localized (French) user-facing messages, keyed by error code"""

DEFAULT_MESSAGE = "Une erreur est survenue. Veuillez réessayer"

MESSAGES = {
    "permission_denied": "Vous n'avez pas les droits nécessaires pour cette action",
    "validation_error": "Ce champ est requis",
    "unauthenticated": "Vous devez être connecté pour effectuer cette action.",
    "already_member": "Cet utilisateur est déjà membre",
    "invalid_target": "Le propriétaire du projet ne peut pas être modifié",
    "terminal_state": "Cette tâche est déjà terminée",
    "invite_not_found": "Invitation introuvable ou déjà utilisée",
    "not_found": "Workflow introuvable",
    "email_in_use": "Cette adresse email est déjà utilisée",
    "invalid_email": "Adresse email invalide",
    "weak_password": "Le mot de passe doit contenir au moins 6 caractères",
    "invalid_credentials": "Email ou mot de passe incorrect",
    "network_failure": "Erreur de connexion. Vérifiez votre connexion internet",
    "unknown": DEFAULT_MESSAGE,
}


def get_message(code: str) -> str:
    """Return the localized message for an error code"""
    return MESSAGES.get(code, DEFAULT_MESSAGE)
