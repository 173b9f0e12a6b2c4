"""Affichage console des états et bilans hebdomadaires."""
