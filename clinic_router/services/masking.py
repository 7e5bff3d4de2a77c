'''
Masking of patient contact details before they reach the logs.

masked = mask_contact("(484) 982-0184")   -> "(484) 982-0000"
masked = mask_contact("jane.doe@mail.com") -> "1F3A9C@anon.example"
'''

import hmac
import re
import hashlib

deterministic_key = "clinic_router_log_mask".encode("utf-8")

EMAIL_RE = re.compile(r"([A-Za-z0-9._+\-]+)@([A-Za-z0-9.\-]+\.[A-Za-z]{2,})")


def generate_deterministic_code(text, code_length=6):
    digest = hmac.new(deterministic_key, text.encode("utf-8"), hashlib.sha256).hexdigest().upper()
    return digest[:code_length]


def mask_phone(phone_str):
    """Replace the last four digits, keeping the original punctuation"""
    masked_last4 = "0000"
    new_chars = list(phone_str)
    di = len(masked_last4) - 1
    for i in range(len(phone_str)-1, -1, -1):
        if di < 0:
            break
        if phone_str[i].isdigit():
            new_chars[i] = masked_last4[di]
            di -= 1
    return "".join(new_chars)


def mask_email(email_str):
    match = EMAIL_RE.match(email_str)
    if not match:
        return ""
    return generate_deterministic_code(match.group(1)) + "@anon.example"


def mask_contact(value):
    """Mask a phone number or email address; anything else becomes a short code"""
    if value is None:
        return None
    text = str(value)
    if EMAIL_RE.match(text):
        return mask_email(text)
    if sum(ch.isdigit() for ch in text) >= 4:
        return mask_phone(text)
    return generate_deterministic_code(text)
