from agora.schemas import OrganizerCard

COMMUNITY_BLURB = (
    'Building and empowering the Stellar ecosystem in {region} through '
    'education, developer support, and real-world blockchain adoption.'
)

FEATURED_ORGANIZERS = (
    OrganizerCard(
        id='stellar-west-africa',
        title='Stellar West Africa',
        description=COMMUNITY_BLURB.format(region='West Africa'),
        image='/icons/stellar-west-africa.svg',
    ),
    OrganizerCard(
        id='stellar-east-african-community',
        title='Stellar East African Community',
        description=COMMUNITY_BLURB.format(region='East Africa'),
        image='/icons/stellar-east-africa.svg',
    ),
    OrganizerCard(
        id='stellar-india',
        title='Stellar India',
        description=COMMUNITY_BLURB.format(region='West Africa'),
        image='/icons/stellar-india.svg',
    ),
    OrganizerCard(
        id='stellar-portugal',
        title='Stellar Portugal',
        description=COMMUNITY_BLURB.format(region='West Africa'),
        image='/icons/stellar-portugal.svg',
    ),
)
