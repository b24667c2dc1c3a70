"""Customer-facing strings for the ordering flow."""

VALIDATION = {
    "date_required": "Selecione uma data.",
    "date_invalid": "Data inválida.",
    "date_sunday": "Não abrimos aos domingos.",
    "date_sold_out": "Dia esgotado. Escolha outra data.",
    "date_out_of_range": "Escolha uma data entre hoje e as próximas semanas.",
    "time_required": "Selecione um horário.",
    "time_invalid": "Horário indisponível.",
    "cart_empty": "Adicione pelo menos um item ao pedido.",
    "order_total_zero": "O pedido ficou sem valor. Confira os preços dos itens.",
    "name_required": "Informe seu nome.",
    "phone_invalid": "Telefone inválido. Use o formato (XXX) XXX-XXXX.",
    "payment_invalid": "Escolha Zelle ou dinheiro.",
}

PENDING = "Enviando seu pedido..."
NOT_READY = "Finalize a escolha de data e horário antes de enviar."
