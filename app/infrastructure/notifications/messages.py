"""WhatsApp message bodies (Spanish, as sent to customers)."""

ROLE_LABELS = {"partner": "Socio", "employee": "Empleado"}


def invite_body(app_url: str, code: str, role: str) -> str:
    label = ROLE_LABELS.get(role, role)
    return (
        f"Te invito a Mr. Chifles como {label}.\n\n"
        f"Tu codigo: {code}\n\n"
        f"Registrate aqui: {app_url}/invite?code={code}"
    )


def transfer_request_body(app_url: str, owner_name: str, code: str) -> str:
    return (
        f"{owner_name} quiere transferirte la propiedad de su negocio en Mr. Chifles.\n\n"
        f"Tu codigo: {code}\n\n"
        f"Acepta aqui: {app_url}/transfer?code={code}\n\n"
        "Este codigo expira en 24 horas."
    )


def transfer_accepted_body(app_url: str, recipient_name: str) -> str:
    return (
        f"{recipient_name} acepto la transferencia de tu negocio en Mr. Chifles.\n\n"
        f"Confirma con tu PIN para completarla: {app_url}"
    )
