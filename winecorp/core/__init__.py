"""
Services métier de WineCorp : finance, notation de crédit, conseil
d'administration, actions, prêts, clients et boucle hebdomadaire.
"""
