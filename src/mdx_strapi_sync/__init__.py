"""Import MDX content trees into a Strapi CMS."""

__version__ = "0.1.0"
