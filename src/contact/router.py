from fastapi import APIRouter, Depends

from src.contact.schemas import ContactForm
from src.notifications.email_service import EmailService, get_email_service
from src.exceptions import DependencyError
from src.schemas import MessageResponse

router = APIRouter()

CONTACT_INFO = {
    "email": "ghumakkadyatriii@gmail.com",
    "phone": "+91 6261338159",
    "whatsapp": "+91 9027094703",
    "address": {
        "line1": "Ghumakkad Yatri Tours & Travels",
        "line2": "Near Akruti Computers",
        "city": "Dibiyapur",
        "state": "Auraiya",
        "pincode": "206244",
        "country": "India"
    },
    "businessHours": {
        "weekdays": "9:00 AM - 7:00 PM",
        "weekends": "10:00 AM - 6:00 PM"
    }
}

@router.post("/contact", response_model=MessageResponse)
def submit_contact_form(form: ContactForm, email_service: EmailService = Depends(get_email_service)):
    """Forward a contact form message to the business inbox"""
    try:
        email_service.send_contact_form_email(
            name=form.full_name,
            email=form.email,
            subject=form.subject,
            message=form.message,
            phone=form.phone
        )
    except DependencyError:
        raise DependencyError("Failed to send your message. Please try again later or contact us directly.")

    return MessageResponse(message="Thank you for your message! We will get back to you soon.")

@router.get("/contactInfo")
def get_contact_info():
    return {"status": "success", "data": CONTACT_INFO}
