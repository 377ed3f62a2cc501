"""portal.canned

Fixed answers used by the fast paths and the pattern fallbacks.
"""

from typing import Any, Dict, Optional

from .types import MatchResult

PRODUCT_DETAILS: Dict[int, Dict[str, Any]] = {
    1: {
        "answer": "SupportBot Pro ($499/month) is our flagship AI assistant for customer service. It features advanced natural language processing to understand customer inquiries, 24/7 availability, multilingual support in over 30 languages, seamless escalation to human agents when needed, and integration with popular CRM systems. It's ideal for businesses looking to improve their customer support while reducing costs. Would you like to know more specific features or see a demo?",
        "source_id": "supportbot-details",
        "source_title": "SupportBot Pro Details",
        "related_questions": [
            "How does SupportBot handle complex issues?",
            "What languages does it support?",
            "How can I integrate it with my existing systems?",
        ],
    },
    2: {
        "answer": "Knowledge Hub ($299/month) is our dynamic knowledge base system that uses AI to organize and retrieve information. It features automated categorization of support content, intelligent search capabilities, content gap analysis to identify missing documentation, and analytics to track most-accessed information. It's perfect for teams wanting to maintain an always up-to-date knowledge base with minimal effort. Would you like to know more about its features?",
        "source_id": "knowledgehub-details",
        "source_title": "Knowledge Hub Details",
        "related_questions": [
            "How does Knowledge Hub organize content?",
            "Can it import existing documentation?",
            "Does it integrate with SupportBot Pro?",
        ],
    },
    3: {
        "answer": "Agent Assist ($199/month) is designed to make human support agents more efficient. It provides real-time suggested responses, automated tagging of tickets, customer sentiment analysis, and performance coaching. This tool typically increases agent productivity by 30-40% while improving response quality. Would you like to know how it integrates with your existing support tools?",
        "source_id": "agentassist-details",
        "source_title": "Agent Assist Details",
        "related_questions": [
            "What metrics does Agent Assist track?",
            "How does it help with agent training?",
            "Can it work with our ticketing system?",
        ],
    },
    4: {
        "answer": "Analytics Dashboard ($149/month) provides comprehensive insights into your support operations. It tracks key metrics like resolution time, customer satisfaction, common issues, and agent performance. The dashboard includes customizable reports, trend analysis, and exportable data. It's an essential tool for support managers looking to optimize their operations. Would you like to know what specific KPIs it can track?",
        "source_id": "analytics-details",
        "source_title": "Analytics Dashboard Details",
        "related_questions": [
            "What visualizations are available?",
            "Can I create custom reports?",
            "Does it provide predictive analytics?",
        ],
    },
    5: {
        "answer": "Enterprise Suite ($1499/month) is our comprehensive solution that includes all our products (SupportBot Pro, Knowledge Hub, Agent Assist, and Analytics Dashboard) plus additional enterprise features. These include dedicated support, custom integrations, enhanced security controls, and SLA guarantees. It's designed for large organizations with complex support needs. Would you like to discuss how this could be customized for your organization?",
        "source_id": "enterprise-details",
        "source_title": "Enterprise Suite Details",
        "related_questions": [
            "What kind of SLAs do you offer?",
            "Do you provide implementation assistance?",
            "Can you support global deployments?",
        ],
    },
}

DELIVERY_ANSWER = "Our products are software solutions delivered digitally through our secure customer portal. After purchase, you'll receive immediate access to your account where you can download and implement our tools. For Enterprise customers, we also offer dedicated implementation support with a team that will help you set up and configure the software to meet your specific needs. The implementation process typically takes 2-4 weeks depending on your requirements. Is there anything specific about our delivery process you'd like to know?"

PRICING_ANSWER = "Our pricing is as follows:\n\n1. SupportBot Pro: $499/month\n2. Knowledge Hub: $299/month\n3. Agent Assist: $199/month\n4. Analytics Dashboard: $149/month\n5. Enterprise Suite: $1499/month\n\nAll plans include standard support and regular updates. Enterprise customers also receive dedicated support and implementation assistance. Would you like more details about what's included in each plan?"

PRICING_RELATED = [
    "What's included in the Enterprise Suite?",
    "Do you offer discounts for annual billing?",
    "Can I upgrade my plan later?",
]

DELIVERY_RELATED = [
    "How long does implementation take?",
    "Do you provide training?",
    "What support do you offer during setup?",
]

CANNED: Dict[str, Dict[str, Any]] = {
    "delivery-info": {
        "answer": DELIVERY_ANSWER,
        "source": "FAQ",
        "source_type": "faq",
        "source_title": "Delivery Information",
        "confidence": 95,
        "related_questions": DELIVERY_RELATED,
    },
    "delivery-details": {
        "answer": DELIVERY_ANSWER,
        "source": "FAQ",
        "source_type": "faq",
        "source_title": "Delivery Information",
        "confidence": 95,
        "related_questions": [
            "How long does implementation take?",
            "Do you provide training?",
            "Is there 24/7 support during implementation?",
        ],
    },
    "pricing-info": {
        "answer": PRICING_ANSWER,
        "source": "FAQ",
        "source_type": "faq",
        "source_title": "Pricing Information",
        "confidence": 95,
        "related_questions": PRICING_RELATED,
    },
    "product-lineup": {
        "answer": "Our product lineup includes:\n\n1. SupportBot Pro ($499/month) - Our AI assistant for customer service with NLP capabilities\n2. Knowledge Hub ($299/month) - Knowledge management system with AI organization\n3. Agent Assist ($199/month) - Tools to make human agents more efficient\n4. Analytics Dashboard ($149/month) - Insights and reporting for support operations\n5. Enterprise Suite ($1499/month) - Comprehensive solution with all products\n\nWould you like to know more about any specific product? Just type its number (1-5).",
        "source": "FAQ",
        "source_type": "faq",
        "source_title": "Product Lineup",
        "confidence": 98,
        "related_questions": [
            "What features does SupportBot Pro have?",
            "How does the Knowledge Hub work?",
            "Tell me about the Enterprise Suite",
        ],
    },
    "pricing-details": {
        "answer": "Our pricing is designed to be flexible and scalable:\n\n1. SupportBot Pro: $499/month\n2. Knowledge Hub: $299/month\n3. Agent Assist: $199/month\n4. Analytics Dashboard: $149/month\n5. Enterprise Suite: $1499/month\n\nAll plans include standard support and updates. We offer a 15% discount for annual billing, and volume discounts for larger teams. Would you like to discuss which option might be best for your needs?",
        "source": "FAQ",
        "source_type": "faq",
        "source_title": "Pricing Details",
        "confidence": 95,
        "related_questions": [
            "Do you offer a free trial?",
            "What's included in the Enterprise Suite?",
            "Can I change plans later?",
        ],
    },
    "implementation-details": {
        "answer": "Our implementation process is designed to be smooth and efficient. After purchase, you'll receive immediate access to your customer portal where you can download and set up our software. For Enterprise customers, we provide a dedicated implementation specialist who will guide you through the setup process, customize the solution to your needs, and provide training for your team. The typical implementation timeline is:\n\n- Basic setup: 1-3 days\n- Custom configuration: 1-2 weeks\n- Full enterprise implementation: 2-4 weeks\n\nWe also offer 24/7 support during the implementation phase.",
        "source": "FAQ",
        "source_type": "faq",
        "source_title": "Implementation Process",
        "confidence": 95,
        "related_questions": [
            "What training do you provide?",
            "How do you handle data migration?",
            "What's involved in the enterprise setup?",
        ],
    },
    "product-details": {
        "answer": "I'd be happy to tell you more about our products. We offer SupportBot Pro ($499/month), Knowledge Hub ($299/month), Agent Assist ($199/month), Analytics Dashboard ($149/month), and our Enterprise Suite ($1499/month). Would you like specific details about any of these? You can type a number 1-5 to learn more about each product.",
        "source": "FAQ",
        "source_type": "faq",
        "source_title": "Product Information",
        "confidence": 95,
        "related_questions": [
            "Tell me about SupportBot Pro",
            "What features does Knowledge Hub have?",
            "How does pricing work?",
        ],
    },
    "pricing-followup": {
        "answer": "Our pricing starts at $149/month for the Analytics Dashboard, with SupportBot Pro at $499/month, Knowledge Hub at $299/month, Agent Assist at $199/month, and our comprehensive Enterprise Suite at $1499/month. All plans include standard support and updates. We also offer discounts for annual billing. Would you like more details about what features are included in each plan?",
        "source": "FAQ",
        "source_type": "faq",
        "source_title": "Pricing Information",
        "confidence": 95,
        "related_questions": [
            "What's included in SupportBot Pro?",
            "Do you offer discounts for startups?",
            "Can I customize my plan?",
        ],
    },
    "delivery-followup": {
        "answer": "All our products are delivered digitally through our secure customer portal immediately after purchase. For the Enterprise Suite, we also offer white-glove implementation support where our team helps with setup and configuration according to your needs. The implementation process typically takes 2-4 weeks for enterprise customers, and our team provides training and support throughout the process. Would you like to know more about our implementation services?",
        "source": "FAQ",
        "source_type": "faq",
        "source_title": "Product Delivery Information",
        "confidence": 95,
        "related_questions": DELIVERY_RELATED,
    },
    "account-info": {
        "answer": "I understand you're interested in account-related information. You can manage your account settings, update your profile, change your password, and configure security options through our customer portal. We support role-based access control, two-factor authentication, and SSO integration for enterprise customers. Is there something specific about account management you'd like to know?",
        "source": "FAQ",
        "source_type": "faq",
        "source_title": "Account Management",
        "confidence": 95,
        "related_questions": [
            "How do I reset my password?",
            "Can I add team members to my account?",
            "What security features do you offer?",
        ],
    },
    "tech-support": {
        "answer": "For technical support, we offer 24/7 assistance through our customer portal. Our team can help troubleshoot any issues you're experiencing with our products, with an average response time of under 2 hours. For Enterprise customers, we provide a dedicated support line with guaranteed 30-minute response times. What specific technical issue can I help with?",
        "source": "FAQ",
        "source_type": "faq",
        "source_title": "Technical Support",
        "confidence": 95,
        "related_questions": [
            "How do I contact technical support?",
            "What are your support hours?",
            "Do you have a knowledge base for common issues?",
        ],
    },
    "default-followup": {
        "answer": "Is there something specific I can help you with today? You can ask about our products, pricing, account settings, or technical support. Our most popular products include SupportBot Pro and the Knowledge Hub, which help businesses improve their customer support efficiency.",
        "source": "System",
        "source_type": "doc",
        "source_title": "Default Follow-up",
        "confidence": 90,
        "related_questions": [
            "What products do you offer?",
            "How much does SupportBot Pro cost?",
            "Tell me about your implementation process",
        ],
    },
    "products-overview": {
        "answer": "We offer a wide range of products and services including:\n\n1. AI-powered customer support solutions\n2. Knowledge base management systems\n3. Multilingual support chatbots\n4. Customer data analytics platforms\n5. Custom enterprise solutions\n\nEach product is designed to enhance your customer experience and streamline support operations. Would you like more information about any specific product?",
        "source": "Docs",
        "source_type": "doc",
        "source_title": "Products Overview",
        "confidence": 85,
        "related_questions": None,
    },
    "default": {
        "answer": "I apologize, but I couldn't find a specific answer to your question in our knowledge base. Please try rephrasing your question or contact a senior support agent for assistance.",
        "source": "System",
        "source_type": "doc",
        "source_title": "Default Response",
        "confidence": 40,
        "related_questions": None,
    },
}

# topic -> canned reply for acknowledgments and very short inputs
ACKNOWLEDGMENT_REPLIES = {
    "products": "product-details",
    "pricing": "pricing-followup",
    "delivery": "delivery-followup",
    "account": "account-info",
    "technical": "tech-support",
}

# topic -> canned reply for "tell me more" style commands
COMMAND_REPLIES = {
    "products": "product-lineup",
    "pricing": "pricing-details",
    "delivery": "implementation-details",
}

# public ids for follow-ups that share an answer with another entry
CANNED_SOURCE_IDS = {
    "pricing-followup": "pricing-info",
    "delivery-followup": "delivery-info",
}


def canned(key: str, confidence: Optional[int] = None) -> MatchResult:
    spec = CANNED[key]
    related = spec.get("related_questions")
    return MatchResult(
        answer=spec["answer"],
        source=spec["source"],
        source_type=spec["source_type"],
        source_id=CANNED_SOURCE_IDS.get(key, key),
        source_title=spec["source_title"],
        confidence=spec["confidence"] if confidence is None else confidence,
        related_questions=list(related) if related is not None else None,
    )


def product_detail(number: int, confidence: int = 95) -> MatchResult:
    spec = PRODUCT_DETAILS[number]
    return MatchResult(
        answer=spec["answer"],
        source="FAQ",
        source_type="faq",
        source_id=spec["source_id"],
        source_title=spec["source_title"],
        confidence=confidence,
        related_questions=list(spec["related_questions"]),
    )
