"""
Tuition and payment services.

progress: monthly payment progress, status classification and the yearly grid
tuition:  bulk tuition fee changes
billing:  billing period generation and payment recording
"""
